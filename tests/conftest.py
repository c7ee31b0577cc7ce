# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from tasklist.cli.bootstrap import create_initial_state
from tasklist.core.state import AppState

from .fakes import FixedClock, MemoryKeyValueStore

START = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the console view.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment/.env.
    """
    return SimpleNamespace(
        app_name="tasklist-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        storage_dir=tmp_path / "data" / "store",
        storage_key="tasks",
        default_filter="all",
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(START)


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def state(settings: SimpleNamespace, kv: MemoryKeyValueStore, clock: FixedClock) -> AppState:
    """AppState wired with the in-memory KV store and a deterministic clock."""
    return create_initial_state(settings=settings, kv=kv, clock=clock)
