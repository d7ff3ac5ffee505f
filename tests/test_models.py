"""
Unit tests for Task and Priority.
"""

import pytest

from models import Priority, Task, normalize_priority


pytestmark = pytest.mark.unit


@pytest.mark.parametrize("raw, expected", [
    ("high", Priority.HIGH),
    ("HIGH", Priority.HIGH),
    (" low ", Priority.LOW),
    ("m", Priority.MEDIUM),
    ("h", Priority.HIGH),
    (Priority.LOW, Priority.LOW),
    ("urgent", Priority.MEDIUM),
    ("", Priority.MEDIUM),
    (None, Priority.MEDIUM),
    (3, Priority.MEDIUM),
])
def test_normalize_priority(raw, expected):
    assert normalize_priority(raw) is expected


def test_priority_rank_orders_high_over_low():
    assert Priority.HIGH.rank == 3
    assert Priority.MEDIUM.rank == 2
    assert Priority.LOW.rank == 1


def test_to_dict_uses_stored_key_names():
    task = Task(id=7, text="Write report", priority="high", completed=True,
                created_at="2025-01-01T00:00:00.000Z")

    assert task.to_dict() == {
        "id": 7,
        "text": "Write report",
        "priority": "high",
        "completed": True,
        "createdAt": "2025-01-01T00:00:00.000Z",
    }


def test_legacy_record_without_priority_keeps_it_absent():
    raw = {"id": 1, "text": "Old task", "completed": False, "createdAt": "2024-05-01T10:00:00.000Z"}

    task = Task.from_dict(raw)

    assert task.priority is None
    assert task.effective_priority is Priority.MEDIUM
    assert "priority" not in task.to_dict()
    assert task.to_dict() == raw


def test_unknown_fields_are_carried_through():
    raw = {"id": 2, "text": "Tagged", "priority": "low", "completed": False,
           "createdAt": "2024-05-01T10:00:00.000Z", "tags": ["home"], "emoji": True}

    task = Task.from_dict(raw)

    assert task.extra == {"tags": ["home"], "emoji": True}
    assert task.to_dict() == raw


def test_unrecognized_priority_is_stored_verbatim_but_ranks_as_medium():
    task = Task.from_dict({"id": 3, "text": "x", "priority": "urgent", "completed": False})

    assert task.priority == "urgent"
    assert task.effective_priority is Priority.MEDIUM


@pytest.mark.parametrize("raw", [
    {"id": "1", "text": "string id"},
    {"id": True, "text": "bool id"},
    {"text": "no id"},
    {"id": 4},
    {"id": 5, "text": None},
])
def test_from_dict_rejects_malformed_records(raw):
    with pytest.raises(ValueError):
        Task.from_dict(raw)


def test_explicit_nulls_are_written_back():
    raw = {"id": 6, "text": "nulls", "priority": None, "completed": False, "createdAt": None}

    task = Task.from_dict(raw)

    assert task.priority is None
    assert task.effective_priority is Priority.MEDIUM
    assert task.to_dict() == raw
    assert Task.from_dict(task.to_dict()) == task
