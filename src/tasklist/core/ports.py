# src/tasklist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the persistence medium and the clock swappable and makes testing easier.
"""

from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import Any, Protocol, runtime_checkable


class KeyValueStore(Protocol):
    """
    Durable string slot storage addressed by key.

    get() returns None when nothing was stored under the key.
    set() overwrites; it may raise on failure (quota, permissions, disk).
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...


class Clock(Protocol):
    def now(self) -> datetime: ...


# Receives the full, immutable collection after every successful mutation.
ChangeListener = Callable[[Sequence[Any]], Any]



@runtime_checkable
class TaskRepo(Protocol):
    """Task surface the view layer (commands, console) is allowed to use."""

    # Mutations (each successful one is persisted by the store's listener)
    def add(self, text: str, due_date: date | None = None) -> Any | None: ...
    def toggle(self, task_id: Any) -> bool: ...
    def delete(self, task_id: Any) -> bool: ...
    def edit(self, task_id: Any, new_text: str, new_due_date: date | None = None) -> bool: ...

    # Read-only queries
    def query(self, task_filter: Any = "all") -> tuple[Any, ...]: ...
    def get(self, task_id: Any) -> Any | None: ...
    def counts(self) -> Any: ...
    def snapshot(self) -> tuple[Any, ...]: ...
    def __len__(self) -> int: ...
