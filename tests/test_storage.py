"""
Unit tests for the key-value storage file and the task collection codec.
"""

import json
import logging

import pytest

from models import Task
from storage import LocalStorage, Storage, StorageError


pytestmark = pytest.mark.unit


def test_missing_file_loads_empty(storage, storage_path):
    assert not storage_path.exists()
    assert storage.load_tasks() == []


def test_round_trip_preserves_every_field(storage, make_task):
    tasks = [
        make_task("Newest", priority="high", created_at="2025-01-02T00:00:00.000Z"),
        make_task("Done", priority="low", completed=True, created_at="2025-01-01T00:00:00.000Z"),
        Task(id=99, text="Legacy", priority=None, created_at="2024-01-01T00:00:00.000Z"),
        Task(id=100, text="Extra", extra={"note": "kept"}, created_at="2024-01-01T00:00:00.000Z"),
    ]

    storage.save_tasks(tasks)

    assert storage.load_tasks() == tasks


def test_round_trip_of_empty_collection(storage, storage_path):
    storage.save_tasks([])

    assert storage_path.exists()
    assert storage.load_tasks() == []


def test_collection_is_stored_as_json_string_under_key(storage, storage_path, make_task):
    storage.save_tasks([make_task("Only", created_at="2025-01-01T00:00:00.000Z")])

    document = json.loads(storage_path.read_text(encoding="utf-8"))
    assert isinstance(document["todos"], str)
    assert json.loads(document["todos"])[0]["text"] == "Only"


def test_corrupt_file_loads_empty(storage, storage_path, caplog):
    storage_path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        assert storage.load_tasks() == []
    assert "unreadable" in caplog.text


@pytest.mark.parametrize("document", [
    {"todos": "[broken"},
    {"todos": '{"id": 1}'},
    {"todos": [{"id": 1, "text": "not a string slot"}]},
    ["not", "an", "object"],
])
def test_unusable_slot_loads_empty(storage, storage_path, document):
    storage_path.write_text(json.dumps(document), encoding="utf-8")

    assert storage.load_tasks() == []


def test_malformed_records_are_set_aside_and_written_back(storage, storage_path, make_task):
    entries = [
        {"id": 1, "text": "good", "priority": "high", "completed": False, "createdAt": "2025-01-01T00:00:00.000Z"},
        42,
        {"id": "two", "text": "bad id"},
        {"id": 3, "completed": True},
    ]
    storage_path.write_text(json.dumps({"todos": json.dumps(entries)}), encoding="utf-8")

    tasks = storage.load_tasks()

    assert [t.id for t in tasks] == [1]
    assert storage.set_aside == entries[1:]

    storage.save_tasks(tasks + [make_task("added", id=9)])

    saved = json.loads(json.loads(storage_path.read_text(encoding="utf-8"))["todos"])
    assert saved[0]["text"] == "good"
    assert saved[1]["text"] == "added"
    assert saved[2:] == entries[1:]


def test_saving_keeps_other_slots(storage, storage_path, make_task):
    backend = LocalStorage(storage_path)
    backend.set_item("theme", "dark")

    storage.save_tasks([make_task("x")])

    assert backend.get_item("theme") == "dark"


def test_remove_item(storage_path):
    backend = LocalStorage(storage_path)
    backend.set_item("todos", "[]")

    backend.remove_item("todos")
    backend.remove_item("never-set")

    assert backend.get_item("todos") is None


def test_write_failure_raises_storage_error(tmp_path, make_task):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    storage = Storage.at(blocker / "storage.json")

    with pytest.raises(StorageError):
        storage.save_tasks([make_task("x")])


def test_write_leaves_no_temp_files(storage, storage_path, make_task):
    storage.save_tasks([make_task("x")])

    assert [p.name for p in storage_path.parent.iterdir()] == [storage_path.name]
