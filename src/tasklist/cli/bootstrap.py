# src/tasklist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- loads the persisted task list once and seeds the TaskStore with it,
- wires the persistence bridge as the store's change listener.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.clock import SystemClock
from ..core.ports import Clock, KeyValueStore
from ..core.state import AppState
from ..storage.kv_file import FileKeyValueStore
from ..tasks.persistence import PersistenceBridge
from ..tasks.task_models import TaskFilter
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_dir.mkdir(parents=True, exist_ok=True)


def _initial_filter(settings) -> TaskFilter:
    raw = getattr(settings, "default_filter", "all")
    try:
        return TaskFilter.parse(raw)
    except ValueError:
        logger.warning("Unknown default filter %r; using 'all'.", raw)
        return TaskFilter.ALL


def create_initial_state(
    *,
    settings=None,
    kv: KeyValueStore | None = None,
    clock: Clock | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the storage medium) injectable makes the app easy to
    test and avoids hidden global reads. If settings is None, falls back to
    get_settings(); if kv is None, a FileKeyValueStore under settings.storage_dir
    is used.
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        _ensure_local_dirs(settings)
        kv = FileKeyValueStore(settings.storage_dir)

    persistence = PersistenceBridge(kv, key=getattr(settings, "storage_key", "tasks"))

    store = TaskStore(
        persistence.load(),
        on_change=persistence.save,
        clock=clock or SystemClock(),
    )

    return AppState(
        settings=settings,
        task_store=store,
        persistence=persistence,
        task_filter=_initial_filter(settings),
    )
