from __future__ import annotations

import json

import pytest

from tasklist.errors import MalformedDataError, StorageError
from tasklist.models import Task
from tasklist.observability import get_metrics
from tasklist.persistence import PersistenceAdapter
from tasklist.storage import MemoryKeyValueStore
from tests.helpers.kv import RecordingKeyValueStore
from tests.helpers.logs import LogCapture


def test_load_absent_slot_is_empty(adapter: PersistenceAdapter) -> None:
    assert adapter.load() == []


def test_save_then_load_preserves_order_and_fields() -> None:
    adapter = PersistenceAdapter(MemoryKeyValueStore())
    tasks = [
        Task(id=2, title="b", completed=True),
        Task(id=1, title="  a ", completed=False),
        Task(id=0.25, title="legacy float id"),
        Task(id=7, title="ünïcödé ✓"),
    ]
    adapter.save(tasks)
    assert adapter.load() == tasks


def test_save_overwrites_whole_collection(
    adapter: PersistenceAdapter, backend: RecordingKeyValueStore
) -> None:
    adapter.save([Task(id=1, title="a"), Task(id=2, title="b")])
    adapter.save([Task(id=2, title="b")])

    assert json.loads(backend.data["todos"]) == [{"id": 2, "title": "b", "completed": False}]
    assert len(backend.writes) == 2


def test_wire_format_is_compact_array(
    adapter: PersistenceAdapter, backend: RecordingKeyValueStore
) -> None:
    adapter.save([Task(id=1, title="x")])
    assert backend.data["todos"] == '[{"id":1,"title":"x","completed":false}]'


def test_custom_key() -> None:
    backend = RecordingKeyValueStore()
    adapter = PersistenceAdapter(backend, key="groceries")
    adapter.save([Task(id=1, title="eggs")])
    assert "groceries" in backend.data
    assert "todos" not in backend.data


def test_loads_records_written_by_browser_version() -> None:
    raw = '[{"id":0.5193,"title":"Buy milk","completed":false}]'
    adapter = PersistenceAdapter(MemoryKeyValueStore({"todos": raw}))
    assert adapter.load() == [Task(id=0.5193, title="Buy milk", completed=False)]


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "{}",
        '[{"id": 1}]',
        '[{"id": "x", "title": "t", "completed": false}]',
        '[{"id": 1, "title": 5, "completed": false}]',
    ],
)
def test_malformed_slot_falls_back_to_empty(raw: str, log_capture: LogCapture) -> None:
    adapter = PersistenceAdapter(MemoryKeyValueStore({"todos": raw}), logger=log_capture.logger)

    assert adapter.load() == []

    records = log_capture.records()
    fallback = next(r for r in records if r.get("event") == "load_fallback")
    assert fallback["level"] == "warning"
    assert fallback["key"] == "todos"
    assert get_metrics().value("load_fallbacks", {"backend": "memory"}) == 1


def test_malformed_slot_raises_in_strict_mode() -> None:
    adapter = PersistenceAdapter(MemoryKeyValueStore({"todos": "[oops"}), strict=True)
    with pytest.raises(MalformedDataError) as ei:
        adapter.load()
    assert ei.value.key == "todos"
    assert isinstance(ei.value, StorageError)


def test_backend_errors_propagate(backend: RecordingKeyValueStore) -> None:
    adapter = PersistenceAdapter(backend)
    backend.fail_reads = True
    with pytest.raises(StorageError):
        adapter.load()
    backend.fail_writes = True
    with pytest.raises(StorageError):
        adapter.save([])


def test_clear_removes_slot(adapter: PersistenceAdapter, backend: RecordingKeyValueStore) -> None:
    adapter.save([Task(id=1, title="x")])
    adapter.clear()
    assert "todos" not in backend.data
    assert adapter.load() == []


@pytest.mark.parametrize("raw_id", ["1e400", "-1e400", "Infinity", "NaN"])
def test_non_finite_ids_fall_back_to_empty(raw_id: str, log_capture: LogCapture) -> None:
    raw = f'[{{"id":{raw_id},"title":"x","completed":false}}]'
    adapter = PersistenceAdapter(MemoryKeyValueStore({"todos": raw}), logger=log_capture.logger)

    assert adapter.load() == []
    assert "load_fallback" in log_capture.events()


@pytest.mark.parametrize("raw_id", ["1e400", "NaN"])
def test_non_finite_ids_raise_in_strict_mode(raw_id: str) -> None:
    raw = f'[{{"id":{raw_id},"title":"x","completed":false}}]'
    adapter = PersistenceAdapter(MemoryKeyValueStore({"todos": raw}), strict=True)
    with pytest.raises(MalformedDataError):
        adapter.load()
