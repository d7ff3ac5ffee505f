"""Sample tasks written on first run when the store is empty."""
from __future__ import annotations
import logging
from typing import List, Optional

from models import Priority, Task
from store import TaskStore, iso_timestamp

logger = logging.getLogger(__name__)

SAMPLE_TASKS = (
    ("Learn HTML, CSS and JavaScript", False, Priority.HIGH),
    ("Build a good-looking to-do list", True, Priority.MEDIUM),
    ("Practice coding every day", False, Priority.MEDIUM),
    ("Try out a new task", False, Priority.LOW),
    ("New objective", True, Priority.LOW),
)


def sample_tasks(created_at: str) -> List[Task]:
    return [
        Task(id=i, text=text, priority=priority.value, completed=done, created_at=created_at)
        for i, (text, done, priority) in enumerate(SAMPLE_TASKS, start=1)
    ]


def seed_if_empty(store: TaskStore, now: Optional[float] = None) -> int:
    """Populate an empty store with the samples; return how many were added."""
    if len(store):
        return 0
    stamp = iso_timestamp(store.now() if now is None else now)
    tasks = sample_tasks(stamp)
    store.replace(tasks)
    logger.info("Seeded %d sample tasks", len(tasks))
    return len(tasks)
