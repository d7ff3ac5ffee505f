"""
Shared pytest fixtures for the to-do test suite.

Every test gets its own storage file under tmp_path and a clock it controls,
so ids and timestamps are predictable.
"""

import pytest

from app import TodoApp
from models import Task
from storage import LocalStorage, Storage
from store import TaskStore

# 2025-01-01T00:00:00Z
EPOCH = 1735689600.0


class FakeClock:
    """Callable clock returning epoch seconds; advance() moves it forward."""

    def __init__(self, start: float = EPOCH):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 1.0) -> None:
        self.now += seconds


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "storage.json"


@pytest.fixture
def storage(storage_path):
    return Storage(LocalStorage(storage_path), key="todos")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(storage, clock):
    task_store = TaskStore(storage, clock=clock)
    task_store.load()
    return task_store


@pytest.fixture
def todo_app(store):
    return TodoApp(store)


@pytest.fixture
def make_task():
    """Factory for Task records with sensible defaults."""
    counter = {"next": 1}

    def _make(text="Task", priority="medium", completed=False, created_at=None, **kwargs):
        tid = kwargs.pop("id", None)
        if tid is None:
            tid = counter["next"]
            counter["next"] += 1
        return Task(id=tid, text=text, priority=priority, completed=completed,
                    created_at=created_at, **kwargs)

    return _make
