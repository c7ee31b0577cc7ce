# tests/test_persistence.py

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone

import pytest

from tasklist.tasks.persistence import (
    PersistenceBridge,
    TaskDecodeError,
    deserialize_tasks,
    serialize_tasks,
)
from tasklist.tasks.task_models import Task
from tasklist.tasks.task_store import TaskStore

from .conftest import START
from .fakes import BrokenReadKeyValueStore, FailingKeyValueStore, FixedClock, MemoryKeyValueStore


def _sample() -> list[Task]:
    plus9 = timezone(timedelta(hours=9))
    return [
        Task(id=3, text="with due", created_at=START, completed=False, due_date=date(2025, 1, 20)),
        Task(id=2, text="done, no due", created_at=START - timedelta(days=1), completed=True),
        Task(
            id="legacy-1",
            text="string id, other tz",
            created_at=datetime(2024, 12, 31, 23, 59, 59, 123456, tzinfo=plus9),
        ),
    ]


def _record(**overrides) -> dict:
    rec = {
        "id": 1,
        "text": "x",
        "completed": False,
        "createdAt": "2025-01-15T09:00:00+00:00",
        "dueDate": None,
    }
    rec.update(overrides)
    return rec


def test_round_trip_preserves_every_field() -> None:
    kv = MemoryKeyValueStore()
    bridge = PersistenceBridge(kv)
    tasks = _sample()

    assert bridge.save(tasks) is True
    loaded = bridge.load()

    assert loaded == tasks
    assert loaded[1].due_date is None


def test_wire_format() -> None:
    raw = serialize_tasks(_sample()[:2])
    data = json.loads(raw)

    assert data[0] == {
        "id": 3,
        "text": "with due",
        "completed": False,
        "createdAt": "2025-01-15T09:00:00+00:00",
        "dueDate": "2025-01-20",
    }
    assert data[1]["dueDate"] is None


def test_save_overwrites_single_key() -> None:
    kv = MemoryKeyValueStore()
    bridge = PersistenceBridge(kv, key="my-tasks")

    bridge.save(_sample())
    bridge.save([])

    assert list(kv.data) == ["my-tasks"]
    assert bridge.load() == []


def test_load_absent_key_is_empty() -> None:
    assert PersistenceBridge(MemoryKeyValueStore()).load() == []


@pytest.mark.parametrize(
    "raw",
    [
        '[{"id": 1, "text": "trunc',
        "not json at all",
        "",
        '{"id": 1}',
        "null",
        "[1, 2, 3]",
        json.dumps([_record(text="   ")]),
        json.dumps([_record(completed="yes")]),
        json.dumps([_record(id=True)]),
        json.dumps([_record(id=None)]),
        json.dumps([_record(createdAt="yesterday")]),
        json.dumps([_record(createdAt=None)]),
        json.dumps([_record(dueDate="2025-13-45")]),
        json.dumps([_record(dueDate=20250101)]),
        json.dumps([_record(), _record()]),
        json.dumps([{k: v for k, v in _record().items() if k != "createdAt"}]),
        "[" * 200_000,
        json.dumps([_record(dueDate="0001-01-01T00:00:00+05:00")]),
        json.dumps([_record(dueDate="9999-12-31T23:00:00-05:00")]),
    ],
)
def test_load_malformed_yields_empty(raw: str, caplog) -> None:
    kv = MemoryKeyValueStore(data={"tasks": raw})
    assert PersistenceBridge(kv).load() == []
    assert "corrupt" in caplog.text


def test_one_bad_record_discards_whole_payload() -> None:
    raw = json.dumps([_record(id=1), _record(id=2, createdAt="garbage")])
    with pytest.raises(TaskDecodeError):
        deserialize_tasks(raw)


@pytest.mark.parametrize("due", [None, "", "   "])
def test_blank_due_date_is_absent(due) -> None:
    (task,) = deserialize_tasks(json.dumps([_record(dueDate=due)]))
    assert task.due_date is None


def test_missing_due_date_key_is_absent() -> None:
    rec = _record()
    del rec["dueDate"]
    (task,) = deserialize_tasks(json.dumps([rec]))
    assert task.due_date is None


def test_full_timestamp_due_date_keeps_calendar_day() -> None:
    (task,) = deserialize_tasks(json.dumps([_record(dueDate="2025-01-20T00:00:00")]))
    assert task.due_date == date(2025, 1, 20)


def test_js_style_created_at_is_accepted() -> None:
    (task,) = deserialize_tasks(json.dumps([_record(createdAt="2025-01-15T09:00:00.000Z")]))
    assert task.created_at == START


def test_naive_created_at_becomes_aware() -> None:
    (task,) = deserialize_tasks(json.dumps([_record(createdAt="2025-01-15T09:00:00")]))
    assert task.created_at.tzinfo is not None


def test_save_failure_is_reported_not_raised(caplog) -> None:
    bridge = PersistenceBridge(FailingKeyValueStore())
    assert bridge.save(_sample()) is False
    assert "Failed to save" in caplog.text


def test_read_failure_falls_back_to_empty(caplog) -> None:
    assert PersistenceBridge(BrokenReadKeyValueStore()).load() == []
    assert "Failed to read" in caplog.text


def test_store_keeps_working_when_saves_fail() -> None:
    kv = FailingKeyValueStore()
    bridge = PersistenceBridge(kv)
    store = TaskStore(bridge.load(), on_change=bridge.save, clock=FixedClock(START))

    a = store.add("a")
    store.add("b")
    store.toggle(a.id)

    assert len(store) == 2
    assert store.get(a.id).completed is True
    assert kv.writes == 3


def test_every_mutation_saves_full_state() -> None:
    kv = MemoryKeyValueStore()
    bridge = PersistenceBridge(kv)
    store = TaskStore(on_change=bridge.save, clock=FixedClock(START))

    a = store.add("a", date(2025, 2, 1))
    b = store.add("b")
    store.toggle(b.id)
    store.edit(a.id, "a2", None)
    store.add(" ")  # rejected, no save

    assert kv.writes == 4
    assert PersistenceBridge(kv).load() == list(store.snapshot())
