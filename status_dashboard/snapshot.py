import copy
import json
import os
import tempfile
from collections import OrderedDict, Counter
from datetime import datetime, timezone

PR_STATUSES = ("open", "merged", "closed")
TASK_STATUSES = ("todo", "in-progress", "done")
PRIORITIES = ("low", "medium", "high")


class SnapshotError(ValueError):
    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


def _gh(repo, number):
    return f"https://github.com/doravidan/{repo}/pull/{number}"


DEFAULT_PRS = [
    {"repo": "new-das-app", "number": 1, "title": "chore: remove dead code from marketDataService",
     "url": _gh("new-das-app", 1), "status": "open", "createdAt": "2026-01-27T22:13:57Z"},
    {"repo": "new-das-app", "number": 2, "title": "Fix test environment: switch from jsdom to happy-dom",
     "url": _gh("new-das-app", 2), "status": "open", "createdAt": "2026-01-27T22:28:33Z"},
    {"repo": "new-das-app", "number": 3, "title": "fix: Use GTC TIF for premarket/postmarket orders",
     "url": _gh("new-das-app", 3), "status": "open", "createdAt": "2026-01-27T22:31:00Z"},
    {"repo": "wheel2go", "number": 1, "title": "feat(api): Implement toll notifications and S3 upload",
     "url": _gh("wheel2go", 1), "status": "open", "createdAt": "2026-01-27T22:09:40Z"},
    {"repo": "wheel2go", "number": 2, "title": "feat(api): Implement password reset email notification",
     "url": _gh("wheel2go", 2), "status": "open", "createdAt": "2026-01-27T22:12:27Z"},
    {"repo": "wheel2go", "number": 3, "title": "fix: resolve TypeScript errors in UI and admin packages",
     "url": _gh("wheel2go", 3), "status": "open", "createdAt": "2026-01-27T22:35:22Z"},
    {"repo": "dreamtales-ai-stories", "number": 1, "title": "fix: resolve all ESLint errors",
     "url": _gh("dreamtales-ai-stories", 1), "status": "open", "createdAt": "2026-01-28T06:15:00Z"},
    {"repo": "clipcraft-ai", "number": 1, "title": "fix: exclude ios/ from ESLint",
     "url": _gh("clipcraft-ai", 1), "status": "open", "createdAt": "2026-01-28T06:18:00Z"},
    {"repo": "style-my-look", "number": 1, "title": "fix: exclude ios/ and scripts/ from ESLint",
     "url": _gh("style-my-look", 1), "status": "open", "createdAt": "2026-01-28T06:20:00Z"},
]

DEFAULT_TASKS = [
    {"id": "1", "title": "Continue codebase learning", "status": "done", "category": "Learning"},
    {"id": "2", "title": "Thought leader research", "status": "done", "category": "Learning"},
    {"id": "3", "title": "App store growth research", "status": "done", "category": "Research"},
    {"id": "4", "title": "Fix lint issues across repos", "status": "done", "category": "Code Quality"},
    {"id": "5", "title": "Review Greg Isenberg content", "status": "todo", "category": "Learning"},
    {"id": "6", "title": "Deep dive Starter Story cases", "status": "todo", "category": "Learning"},
    {"id": "7", "title": "Voice transcription setup", "status": "done", "category": "Tools"},
]

DEFAULT_LEARNING = {
    "reposDocumented": 30,
    "totalRepos": 36,
    "thoughtLeaders": ["Alex Finn", "Greg Isenberg", "Ryan Carson", "Starter Story"],
    "insightsExtracted": 47,
}

DEFAULT_STATS = {
    "linesFixed": 150,
    "issuesFound": 21,
    "prsCreated": 9,
}


def utc_timestamp(now=None):
    if now is None:
        now = datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def default_snapshot(now=None):
    """Sample dataset served until the automation writes a real status file."""
    return {
        "lastUpdated": utc_timestamp(now),
        "prs": copy.deepcopy(DEFAULT_PRS),
        "tasks": copy.deepcopy(DEFAULT_TASKS),
        "learning": copy.deepcopy(DEFAULT_LEARNING),
        "stats": copy.deepcopy(DEFAULT_STATS),
    }


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _check_timestamp(value, where, problems):
    if not isinstance(value, str):
        problems.append(f"{where}: expected ISO-8601 string")
        return
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        problems.append(f"{where}: not an ISO-8601 timestamp: {value!r}")


def _check_strings(record, keys, where, problems):
    for key in keys:
        if not isinstance(record.get(key), str):
            problems.append(f"{where}.{key}: expected string")


def _check_prs(prs, problems):
    if not isinstance(prs, list):
        problems.append("prs: expected list")
        return
    seen = set()
    for i, pr in enumerate(prs):
        where = f"prs[{i}]"
        if not isinstance(pr, dict):
            problems.append(f"{where}: expected object")
            continue
        _check_strings(pr, ("repo", "title", "url"), where, problems)
        number = pr.get("number")
        if not _is_int(number) or number <= 0:
            problems.append(f"{where}.number: expected positive integer")
        elif isinstance(pr.get("repo"), str):
            key = (pr["repo"], number)
            if key in seen:
                problems.append(f"{where}: duplicate PR {pr['repo']}#{number}")
            seen.add(key)
        if pr.get("status") not in PR_STATUSES:
            problems.append(f"{where}.status: expected one of {', '.join(PR_STATUSES)}")
        _check_timestamp(pr.get("createdAt"), f"{where}.createdAt", problems)


def _check_tasks(tasks, problems):
    if not isinstance(tasks, list):
        problems.append("tasks: expected list")
        return
    seen = set()
    for i, task in enumerate(tasks):
        where = f"tasks[{i}]"
        if not isinstance(task, dict):
            problems.append(f"{where}: expected object")
            continue
        _check_strings(task, ("id", "title", "category"), where, problems)
        task_id = task.get("id")
        if isinstance(task_id, str):
            if task_id in seen:
                problems.append(f"{where}.id: duplicate task id {task_id!r}")
            seen.add(task_id)
        if task.get("status") not in TASK_STATUSES:
            problems.append(f"{where}.status: expected one of {', '.join(TASK_STATUSES)}")
        if "priority" in task and task["priority"] not in PRIORITIES:
            problems.append(f"{where}.priority: expected one of {', '.join(PRIORITIES)}")


def _check_counts(section, name, keys, problems):
    for key in keys:
        value = section.get(key)
        if not _is_int(value) or value < 0:
            problems.append(f"{name}.{key}: expected non-negative integer")


def _check_learning(learning, problems):
    if not isinstance(learning, dict):
        problems.append("learning: expected object")
        return
    _check_counts(learning, "learning", ("reposDocumented", "insightsExtracted"), problems)
    total = learning.get("totalRepos")
    if not _is_int(total) or total <= 0:
        problems.append("learning.totalRepos: expected positive integer")
    elif _is_int(learning.get("reposDocumented")) and learning["reposDocumented"] > total:
        problems.append("learning.reposDocumented: exceeds totalRepos")
    leaders = learning.get("thoughtLeaders")
    if not isinstance(leaders, list) or not all(isinstance(x, str) for x in leaders):
        problems.append("learning.thoughtLeaders: expected list of strings")


def check_snapshot(data):
    """Return a list of shape problems, empty when the snapshot is well formed."""
    if not isinstance(data, dict):
        return ["snapshot: expected object"]

    problems = []
    _check_timestamp(data.get("lastUpdated"), "lastUpdated", problems)
    _check_prs(data.get("prs"), problems)
    _check_tasks(data.get("tasks"), problems)
    _check_learning(data.get("learning"), problems)

    stats = data.get("stats")
    if isinstance(stats, dict):
        _check_counts(stats, "stats", ("linesFixed", "issuesFound", "prsCreated"), problems)
    else:
        problems.append("stats: expected object")
    return problems


def records(value):
    """Dict entries of a list field; anything else in the file is ignored by the views."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def section(snapshot, key):
    value = snapshot.get(key)
    return value if isinstance(value, dict) else {}


def _label(value, fallback="unknown"):
    return value if isinstance(value, str) else fallback


def task_categories(tasks):
    """Distinct task categories in first-seen order."""
    categories = []
    for task in records(tasks):
        category = task.get("category")
        if isinstance(category, str) and category not in categories:
            categories.append(category)
    return categories


def filter_tasks(tasks, category=None):
    if not category:
        return records(tasks)
    return [task for task in records(tasks) if task.get("category") == category]


def group_tasks(tasks):
    """Kanban columns in board order; unknown statuses get their own trailing column."""
    columns = OrderedDict((status, []) for status in TASK_STATUSES)
    for task in records(tasks):
        columns.setdefault(_label(task.get("status")), []).append(task)
    return columns


def summarize(snapshot):
    prs = records(snapshot.get("prs"))
    tasks = records(snapshot.get("tasks"))
    learning = section(snapshot, "learning")

    per_repo = OrderedDict()
    for pr in prs:
        repo = _label(pr.get("repo"))
        per_repo[repo] = per_repo.get(repo, 0) + 1

    total = learning.get("totalRepos")
    documented = learning.get("reposDocumented")
    if _is_int(total) and _is_int(documented) and total > 0:
        percent = round(documented * 100 / total)
    else:
        percent = 0

    return {
        "open_prs": sum(1 for pr in prs if pr.get("status") == "open"),
        "prs_per_repo": per_repo,
        "task_counts": dict(Counter(_label(task.get("status")) for task in tasks)),
        "learning_percent": percent,
    }


def write_status(snapshot, path):
    problems = check_snapshot(snapshot)
    if problems:
        raise SnapshotError(problems)

    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=directory, prefix=".status-", suffix=".json")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(snapshot, f, indent=2)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    return path
