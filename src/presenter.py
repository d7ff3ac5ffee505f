"""Presenter: turns a task collection into a sorted, sectioned view model.

Order within the list:
    1. incomplete before completed
    2. priority rank, high first (missing/unknown priority ranks as medium)
    3. incomplete: newest createdAt first; completed: oldest createdAt first

Completion time is not recorded, so "oldest completed first" really means
oldest created. Counters are computed over the input as given. Nothing here
mutates the tasks or produces markup.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from models import Priority, Task

OLDEST = float('-inf')


@dataclass(frozen=True)
class TaskItem:
    """One rendered row: the task plus what renderers need to show it."""
    task: Task
    priority: Priority
    position: int

    @property
    def id(self) -> int:
        return self.task.id

    @property
    def text(self) -> str:
        return self.task.text

    @property
    def completed(self) -> bool:
        return self.task.completed


@dataclass(frozen=True)
class ViewModel:
    incomplete: Tuple[TaskItem, ...] = ()
    completed: Tuple[TaskItem, ...] = ()
    separator_count: Optional[int] = None
    total: int = 0
    completed_count: int = 0
    pending_count: int = 0
    high_priority_pending_count: int = 0
    empty_state: bool = True

    @property
    def show_stats(self) -> bool:
        return not self.empty_state

    @property
    def show_clear_completed(self) -> bool:
        return self.completed_count > 0

    @property
    def items(self) -> Tuple[TaskItem, ...]:
        return self.incomplete + self.completed

    def task_at(self, position: int) -> Optional[TaskItem]:
        """Return the item shown at a 1-based position, or None."""
        items = self.items
        if 1 <= position <= len(items):
            return items[position - 1]
        return None


EMPTY_VIEW = ViewModel()


def created_instant(value: Any) -> float:
    """Read a createdAt value as epoch seconds.

    ISO strings are parsed (naive ones taken as UTC), numbers are epoch
    milliseconds. Anything else counts as the oldest possible instant.
    """
    if isinstance(value, bool):
        return OLDEST
    if isinstance(value, (int, float)):
        try:
            seconds = value / 1000.0
        except OverflowError:
            return OLDEST
        return OLDEST if math.isnan(seconds) else seconds
    if not isinstance(value, str) or not value.strip():
        return OLDEST
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return OLDEST
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    try:
        return dt.timestamp()
    except (OverflowError, ValueError, OSError):
        return OLDEST


def sort_key(task: Task) -> Tuple[int, int, float]:
    rank = task.effective_priority.rank
    created = created_instant(task.created_at)
    if task.completed:
        return (1, -rank, created)
    return (0, -rank, -created)


def sort_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Stable sort into display order."""
    return sorted(tasks, key=sort_key)


def render(tasks: Sequence[Task]) -> ViewModel:
    tasks = list(tasks)
    if not tasks:
        return EMPTY_VIEW

    ordered = sort_tasks(tasks)
    items = [TaskItem(task=t, priority=t.effective_priority, position=i)
             for i, t in enumerate(ordered, start=1)]
    incomplete = tuple(item for item in items if not item.completed)
    completed = tuple(item for item in items if item.completed)

    total = len(tasks)
    completed_count = sum(1 for t in tasks if t.completed)
    high_pending = sum(1 for t in tasks
                       if not t.completed and t.effective_priority is Priority.HIGH)

    return ViewModel(
        incomplete=incomplete,
        completed=completed,
        separator_count=len(completed) if incomplete and completed else None,
        total=total,
        completed_count=completed_count,
        pending_count=total - completed_count,
        high_priority_pending_count=high_pending,
        empty_state=False,
    )
