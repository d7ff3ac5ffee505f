"""Task store: owns the task collection and is its only mutator.

New tasks are prepended, so stored order is newest-first; display order is
decided later by the presenter. Every successful mutation is saved right
away. Lookup misses and blank text are no-ops, never errors.
"""
from __future__ import annotations
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional

from models import Task, normalize_priority
from storage import Storage

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def iso_timestamp(seconds: float) -> str:
    """Format epoch seconds as UTC ISO-8601 with milliseconds and a Z suffix."""
    dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class TaskStore:
    def __init__(self, storage: Storage, clock: Clock = time.time):
        self.storage = storage
        self._clock = clock
        self._tasks: List[Task] = []
        self._last_id: int = 0

    def now(self) -> float:
        return self._clock()

    # -------------------- queries --------------------
    @property
    def tasks(self) -> List[Task]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: int) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # -------------------- persistence --------------------
    def load(self) -> List[Task]:
        """Replace the in-memory collection with what storage holds."""
        seen = set()
        loaded: List[Task] = []
        for task in self.storage.load_tasks():
            if task.id in seen:
                logger.warning("Setting aside stored task with duplicate id %s", task.id)
                self.storage.set_aside.append(task.to_dict())
                continue
            seen.add(task.id)
            loaded.append(task)
        self._tasks = loaded
        self._last_id = max([self._last_id] + [t.id for t in loaded])
        logger.debug("Loaded %d tasks", len(loaded))
        return self.tasks

    def save(self) -> None:
        self.storage.save_tasks(self._tasks)

    def replace(self, tasks: Iterable[Task]) -> None:
        """Swap in a whole collection (seeding) and save it."""
        self._tasks = list(tasks)
        self._last_id = max([self._last_id] + [t.id for t in self._tasks])
        self.save()

    # -------------------- id management --------------------
    def _allocate_id(self, now: float) -> int:
        nid = max(int(now * 1000), self._last_id + 1)
        self._last_id = nid
        return nid

    # -------------------- task operations --------------------
    def create(self, text: str, priority: Any = None) -> Optional[Task]:
        text = (text or '').strip()
        if not text:
            logger.debug("Ignoring blank task text")
            return None
        now = self.now()
        task = Task(
            id=self._allocate_id(now),
            text=text,
            priority=normalize_priority(priority).value,
            completed=False,
            created_at=iso_timestamp(now),
        )
        self._tasks.insert(0, task)
        logger.debug("Created task %s (%s)", task.id, task.priority)
        self.save()
        return task

    def toggle(self, task_id: int) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            logger.debug("Toggle: task id %s not found", task_id)
            return None
        task.completed = not task.completed
        logger.debug("Task %s completed=%s", task_id, task.completed)
        self.save()
        return task

    def delete(self, task_id: int) -> bool:
        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) == len(self._tasks):
            logger.debug("Delete: task id %s not found", task_id)
            return False
        self._tasks = remaining
        logger.debug("Deleted task %s", task_id)
        self.save()
        return True

    def clear_completed(self) -> int:
        remaining = [t for t in self._tasks if not t.completed]
        removed = len(self._tasks) - len(remaining)
        if removed:
            self._tasks = remaining
            logger.debug("Cleared %d completed tasks", removed)
            self.save()
        return removed

    def __str__(self) -> str:
        done = sum(1 for t in self._tasks if t.completed)
        return f'{len(self._tasks)} tasks, {done} completed'
