# src/tasklist/tasks/persistence.py

from __future__ import annotations

"""
Persistence bridge: full-collection round trip through a key/value slot.

Wire format (one JSON array under a single key):
    [{"id": 1737000000000, "text": "...", "completed": false,
      "createdAt": "2025-01-16T10:00:00+02:00", "dueDate": "2025-01-20"}, ...]

dueDate is null when absent. Saving never raises; loading never raises and
falls back to an empty list when the stored value cannot be trusted.
"""

import json
import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from ..core.ports import KeyValueStore
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"

_REQUIRED_FIELDS = ("id", "text", "completed", "createdAt")


class TaskDecodeError(ValueError):
    """Stored task data is malformed."""


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "createdAt": task.created_at.isoformat(),
        "dueDate": task.due_date.isoformat() if task.due_date is not None else None,
    }


def serialize_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([task_to_record(t) for t in tasks], ensure_ascii=False)


def _parse_created_at(raw: Any) -> datetime:
    if not isinstance(raw, str) or not raw.strip():
        raise TaskDecodeError(f"createdAt must be an ISO-8601 string, got {raw!r}")
    try:
        dt = datetime.fromisoformat(raw.strip())
    except ValueError as e:
        raise TaskDecodeError(f"invalid createdAt {raw!r}") from e
    if dt.tzinfo is not None:
        return dt
    # Naive values are taken as local time.
    try:
        return dt.astimezone()
    except (ValueError, OverflowError) as e:
        raise TaskDecodeError(f"createdAt out of range {raw!r}") from e


def _parse_due_date(raw: Any) -> date | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise TaskDecodeError(f"dueDate must be a string or null, got {raw!r}")
    value = raw.strip()
    if not value:
        return None
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        # Full timestamps are accepted; only the calendar day is kept.
        dt = datetime.fromisoformat(value)
        if dt.tzinfo is not None:
            dt = dt.astimezone()
    except (ValueError, OverflowError) as e:
        raise TaskDecodeError(f"invalid dueDate {raw!r}") from e
    return dt.date()


def record_to_task(record: Any) -> Task:
    if not isinstance(record, dict):
        raise TaskDecodeError(f"task record must be an object, got {type(record).__name__}")

    missing = [name for name in _REQUIRED_FIELDS if name not in record]
    if missing:
        raise TaskDecodeError(f"task record missing fields: {', '.join(missing)}")

    task_id = record["id"]
    # bool is an int subclass; reject it explicitly.
    if isinstance(task_id, bool) or not isinstance(task_id, (int, str)) or task_id == "":
        raise TaskDecodeError(f"invalid id {task_id!r}")

    text = record["text"]
    if not isinstance(text, str) or not text.strip():
        raise TaskDecodeError(f"task {task_id!r} has empty text")

    completed = record["completed"]
    if not isinstance(completed, bool):
        raise TaskDecodeError(f"task {task_id!r} has non-boolean completed")

    return Task(
        id=task_id,
        text=text,
        created_at=_parse_created_at(record["createdAt"]),
        completed=completed,
        due_date=_parse_due_date(record.get("dueDate")),
    )


def deserialize_tasks(raw: str) -> list[Task]:
    """Parse a stored payload. Any bad record makes the whole payload invalid."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise TaskDecodeError(f"stored tasks are not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise TaskDecodeError(f"stored tasks must be a list, got {type(data).__name__}")

    tasks = [record_to_task(r) for r in data]

    seen: set[Any] = set()
    for t in tasks:
        if t.id in seen:
            raise TaskDecodeError(f"duplicate task id {t.id!r}")
        seen.add(t.id)

    return tasks


class PersistenceBridge:
    """Mirrors the whole task list to one fixed key of a KeyValueStore."""

    def __init__(self, kv: KeyValueStore, *, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._kv = kv
        self.key = key

    def save(self, tasks: Iterable[Task]) -> bool:
        """Overwrite the stored collection. Failures are logged and reported as False."""
        tasks = tuple(tasks)
        try:
            payload = serialize_tasks(tasks)
            self._kv.set(self.key, payload)
        except Exception:
            logger.exception("Failed to save %d tasks under key=%s", len(tasks), self.key)
            return False
        logger.debug("Saved %d tasks under key=%s", len(tasks), self.key)
        return True

    def load(self) -> list[Task]:
        """Read the stored collection; absent or corrupt data yields []."""
        try:
            raw = self._kv.get(self.key)
        except Exception:
            logger.exception("Failed to read stored tasks under key=%s", self.key)
            return []

        if raw is None:
            logger.info("No stored tasks under key=%s; starting empty.", self.key)
            return []

        try:
            tasks = deserialize_tasks(raw)
        except TaskDecodeError as e:
            logger.error("Stored tasks under key=%s are corrupt (%s); starting empty.", self.key, e)
            return []

        logger.info("Loaded %d tasks from key=%s", len(tasks), self.key)
        return tasks
