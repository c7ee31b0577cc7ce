# tests/test_bootstrap.py

from __future__ import annotations

import json
from datetime import date

from tasklist.cli.bootstrap import create_initial_state
from tasklist.connectors.console_connector import handle_line, run_console_loop
from tasklist.tasks.task_models import TaskFilter

from .conftest import START
from .fakes import FixedClock, MemoryKeyValueStore


def test_state_survives_restart(settings, kv, clock) -> None:
    first = create_initial_state(settings=settings, kv=kv, clock=clock)
    a = first.task_store.add("water plants", date(2025, 1, 20))
    first.task_store.add("read")
    first.task_store.toggle(a.id)

    second = create_initial_state(settings=settings, kv=kv, clock=FixedClock(START))

    assert second.task_store.snapshot() == first.task_store.snapshot()


def test_corrupt_storage_starts_empty(settings, clock) -> None:
    kv = MemoryKeyValueStore(data={"tasks": "[{broken"})
    state = create_initial_state(settings=settings, kv=kv, clock=clock)

    assert len(state.task_store) == 0
    state.task_store.add("fresh start")
    assert json.loads(kv.data["tasks"])[0]["text"] == "fresh start"


def test_file_storage_used_by_default(settings, clock) -> None:
    state = create_initial_state(settings=settings, clock=clock)
    state.task_store.add("on disk")

    stored = settings.storage_dir / "tasks.json"
    assert stored.exists()
    assert json.loads(stored.read_text("utf-8"))[0]["text"] == "on disk"

    again = create_initial_state(settings=settings, clock=clock)
    assert [t.text for t in again.task_store] == ["on disk"]


def test_default_filter_from_settings(settings, kv, clock) -> None:
    settings.default_filter = "pending"
    assert create_initial_state(settings=settings, kv=kv, clock=clock).task_filter is TaskFilter.PENDING

    settings.default_filter = "nonsense"
    assert create_initial_state(settings=settings, kv=kv, clock=clock).task_filter is TaskFilter.ALL


def test_plain_text_line_adds_task(state) -> None:
    reply = handle_line(state, "  buy bread  ") or ""
    assert "Added" in reply
    assert "buy bread" in reply
    assert [t.text for t in state.task_store] == ["buy bread"]


def test_blank_line_is_ignored(state) -> None:
    assert handle_line(state, "   ") is None
    assert len(state.task_store) == 0


def test_crashing_handler_is_contained(state, monkeypatch, caplog) -> None:
    def boom(*_args, **_kwargs):
        raise RuntimeError("bug")

    monkeypatch.setattr(state.task_store, "add", boom)
    assert handle_line(state, "/add x") == "Internal error while handling a command."
    assert "Command handler crashed" in caplog.text


def test_console_loop_runs_until_exit(state, monkeypatch, capsys) -> None:
    lines = iter(["first task", "/done 1", "/list completed", "/exit", "never read"])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(lines))

    run_console_loop(state)

    out = capsys.readouterr().out
    assert "first task" in out
    assert [t.completed for t in state.task_store] == [True]


def test_console_loop_stops_on_eof(state, monkeypatch) -> None:
    def eof(_prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)
    run_console_loop(state)
