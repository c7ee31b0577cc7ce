# src/tasklist/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

TaskId = int | str


class TaskFilter(StrEnum):
    """Which part of the list the view shows."""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | TaskFilter | None) -> TaskFilter:
        """Parse a user/config supplied name. Empty -> ALL, unknown -> ValueError."""
        if isinstance(raw, TaskFilter):
            return raw
        if raw is None or not raw.strip():
            return cls.ALL
        return cls(raw.strip().lower())

    def matches(self, task: Task) -> bool:
        if self is TaskFilter.PENDING:
            return not task.completed
        if self is TaskFilter.COMPLETED:
            return task.completed
        return True


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single task.

    Instances are immutable: the store replaces a task with an updated copy,
    keeping id and created_at.
    """

    id: TaskId
    text: str
    created_at: datetime
    completed: bool = False
    due_date: date | None = None


@dataclass(frozen=True, slots=True)
class TaskCounts:
    total: int
    completed: int
    pending: int
