# src/tasklist/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import replace
from datetime import date, datetime

from ..core.clock import SystemClock
from ..core.ports import ChangeListener, Clock
from . import task_view
from .task_models import Task, TaskCounts, TaskFilter, TaskId

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory task collection; the only mutation surface for tasks.

    Storage order is most-recent-first: add() inserts at the head.

    Mutations that change state notify `on_change` with the full snapshot
    (this is where the persistence bridge hooks in). Rejected input and
    unknown ids are silent no-ops and never notify.
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        *,
        on_change: ChangeListener | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._tasks: list[Task] = list(tasks)
        self._on_change = on_change
        self._clock: Clock = clock or SystemClock()

        ids = [t.id for t in self._tasks]
        if len(set(ids)) != len(ids):
            raise ValueError("duplicate task ids in initial collection")

        self._last_id = max((i for i in ids if isinstance(i, int)), default=0)
        logger.info("TaskStore ready total=%s", len(self._tasks))

    # ---- low-level helpers ----

    def _index_of(self, task_id: TaskId) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def _next_id(self, now: datetime) -> int:
        # Millisecond timestamp, bumped so ids stay strictly increasing
        # when two tasks are created within the same millisecond.
        candidate = int(now.timestamp() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def _changed(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self.snapshot())
        except Exception:
            # In-memory state stays authoritative for this session.
            logger.exception("Task change listener failed.")

    # ---- public API ----

    def add(self, text: str, due_date: date | None = None) -> Task | None:
        clean = (text or "").strip()
        if not clean:
            return None

        now = self._clock.now()
        task = Task(
            id=self._next_id(now),
            text=clean,
            created_at=now,
            completed=False,
            due_date=due_date,
        )
        self._tasks.insert(0, task)
        logger.debug("Task added id=%s due=%s", task.id, due_date)
        self._changed()
        return task

    def toggle(self, task_id: TaskId) -> bool:
        i = self._index_of(task_id)
        if i is None:
            return False

        task = self._tasks[i]
        self._tasks[i] = replace(task, completed=not task.completed)
        logger.debug("Task toggled id=%s completed=%s", task_id, not task.completed)
        self._changed()
        return True

    def delete(self, task_id: TaskId) -> bool:
        i = self._index_of(task_id)
        if i is None:
            return False

        del self._tasks[i]
        logger.debug("Task deleted id=%s", task_id)
        self._changed()
        return True

    def edit(self, task_id: TaskId, new_text: str, new_due_date: date | None = None) -> bool:
        """
        Replace text and due date of a task.

        Passing no due date clears it. Blank text discards the edit and leaves
        the task untouched (same as cancelling).
        """
        clean = (new_text or "").strip()
        if not clean:
            return False

        i = self._index_of(task_id)
        if i is None:
            return False

        self._tasks[i] = replace(self._tasks[i], text=clean, due_date=new_due_date)
        logger.debug("Task edited id=%s due=%s", task_id, new_due_date)
        self._changed()
        return True

    def query(self, task_filter: TaskFilter | str = TaskFilter.ALL) -> tuple[Task, ...]:
        return tuple(task_view.filter_tasks(self._tasks, task_filter))

    def get(self, task_id: TaskId) -> Task | None:
        i = self._index_of(task_id)
        return None if i is None else self._tasks[i]

    def counts(self) -> TaskCounts:
        return task_view.count_tasks(self._tasks)

    def snapshot(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.snapshot())
