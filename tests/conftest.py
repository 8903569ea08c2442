import json

import pytest

from status_dashboard.app import create_app
from status_dashboard.config import DashboardConfig

SECRET = "s3cret-Value"


@pytest.fixture
def config(tmp_path):
    return DashboardConfig(base_dir=str(tmp_path), secret=SECRET)


@pytest.fixture
def client(config):
    app = create_app(config)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def write_json(config):
    def _write(data):
        with open(config.status_path, "w") as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)
        return config.status_path
    return _write


@pytest.fixture
def custom_snapshot():
    return {
        "lastUpdated": "2026-02-01T09:30:00Z",
        "prs": [
            {"repo": "widget", "number": 7, "title": "Add frobnicator", "url": "https://example.com/widget/pull/7",
             "status": "merged", "createdAt": "2026-01-30T12:00:00Z"},
        ],
        "tasks": [
            {"id": "a1", "title": "Write release notes", "status": "in-progress", "category": "Docs",
             "priority": "high"},
        ],
        "learning": {"reposDocumented": 2, "totalRepos": 5, "thoughtLeaders": ["Ada"], "insightsExtracted": 3},
        "stats": {"linesFixed": 10, "issuesFound": 1, "prsCreated": 1},
    }
