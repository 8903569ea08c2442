"""Status snapshot loading.

Loading is split in two: ``attempt_load`` touches the filesystem and reports
what went wrong, ``select_snapshot`` decides what to serve. The endpoint always
gets a snapshot back; read and parse failures fall back to the built-in default.
"""
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from .logs import log_event
from .snapshot import default_snapshot

MISSING = "missing"
UNREADABLE = "unreadable"
MALFORMED = "malformed"


@dataclass(frozen=True)
class LoadResult:
    data: Optional[Any] = None
    reason: Optional[str] = None
    detail: str = ""

    @property
    def ok(self):
        return self.reason is None


def attempt_load(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return LoadResult(reason=MISSING, detail=f"{path} not found")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return LoadResult(reason=MALFORMED, detail=str(e))
    except OSError as e:
        return LoadResult(reason=UNREADABLE, detail=str(e))

    if not isinstance(data, dict):
        return LoadResult(reason=MALFORMED,
                          detail=f"expected a JSON object, got {type(data).__name__}")
    return LoadResult(data=data)


def select_snapshot(result, now=None):
    if result.ok:
        return result.data
    return default_snapshot(now)


class StatusProvider:

    def __init__(self, path):
        self.path = path

    def get_status(self, now=None):
        result = attempt_load(self.path)
        if result.reason == UNREADABLE:
            log_event("error", f"Failed to read status file: {result.detail}")
        elif result.reason == MALFORMED:
            log_event("warn", f"Malformed status file {self.path}: {result.detail}")
        return select_snapshot(result, now or datetime.now(timezone.utc))
