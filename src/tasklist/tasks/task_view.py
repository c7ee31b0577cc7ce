# src/tasklist/tasks/task_view.py

"""
Derived, read-only projections of the task list.

Everything here is a pure function of its inputs: nothing is cached and the
given tasks are never modified.

Display order (applied after filtering):
1. pending before completed
2. tasks with a due date before tasks without one
3. both dated: earlier due date first
4. both undated: most recently created first
Remaining ties: newer created_at first, then id.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from .task_models import Task, TaskCounts, TaskFilter

EMPTY_MESSAGES = {
    TaskFilter.ALL: "No tasks yet. Add a new one to get started.",
    TaskFilter.PENDING: "No pending tasks.",
    TaskFilter.COMPLETED: "No completed tasks.",
}


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter | str = TaskFilter.ALL) -> list[Task]:
    f = TaskFilter.parse(task_filter)
    return [t for t in tasks if f.matches(t)]


def sort_key(task: Task) -> tuple:
    has_due = task.due_date is not None
    # date.toordinal() keeps the key comparable when due_date is missing.
    due_ord = task.due_date.toordinal() if has_due else 0
    return (
        task.completed,
        not has_due,
        due_ord,
        -task.created_at.timestamp(),
        str(task.id),
    )


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=sort_key)


def visible_tasks(tasks: Iterable[Task], task_filter: TaskFilter | str = TaskFilter.ALL) -> list[Task]:
    return sort_tasks(filter_tasks(tasks, task_filter))


def is_overdue(task: Task, today: date | None = None) -> bool:
    """Due strictly before today (local calendar day) and still pending."""
    if task.due_date is None or task.completed:
        return False
    if today is None:
        today = date.today()
    return task.due_date < today


def count_tasks(tasks: Iterable[Task]) -> TaskCounts:
    total = 0
    completed = 0
    for t in tasks:
        total += 1
        if t.completed:
            completed += 1
    return TaskCounts(total=total, completed=completed, pending=total - completed)


def empty_message(task_filter: TaskFilter | str = TaskFilter.ALL) -> str:
    return EMPTY_MESSAGES[TaskFilter.parse(task_filter)]
