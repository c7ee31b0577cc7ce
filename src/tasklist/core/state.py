# src/tasklist/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..tasks.persistence import PersistenceBridge
from ..tasks.task_models import Task, TaskFilter, TaskId
from .ports import TaskRepo


@dataclass(slots=True)
class EditSession:
    """
    Which task the user is editing, plus the unsaved draft.

    Presentation state only: it is never persisted and the store knows
    nothing about it.
    """

    active_edit_id: TaskId | None = None
    draft_text: str = ""
    draft_due_date: date | None = None

    @property
    def active(self) -> bool:
        return self.active_edit_id is not None

    def begin(self, task: Task) -> None:
        self.active_edit_id = task.id
        self.draft_text = task.text
        self.draft_due_date = task.due_date

    def cancel(self) -> None:
        self.active_edit_id = None
        self.draft_text = ""
        self.draft_due_date = None


@dataclass
class AppState:
    # Settings object (real Settings or a test stand-in with the same attributes).
    settings: Any

    task_store: TaskRepo
    persistence: PersistenceBridge

    task_filter: TaskFilter = TaskFilter.ALL
    edit: EditSession = field(default_factory=EditSession)
