"""Application context: ties the store to the presenter.

Renderers hold a TodoApp and call its capability methods (create, toggle,
delete, clear_completed). After every call the collection is re-rendered
and subscribers receive the fresh ViewModel; short notices (the "toast"
messages) go to notice listeners.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, List, Optional

from models import Task
from presenter import ViewModel, render
from store import TaskStore

logger = logging.getLogger(__name__)

ViewListener = Callable[[ViewModel], None]
NoticeListener = Callable[[str], None]


class TodoApp:
    def __init__(self, store: TaskStore):
        self.store = store
        self._view_listeners: List[ViewListener] = []
        self._notice_listeners: List[NoticeListener] = []
        self._view: ViewModel = render(store.tasks)

    # -------------------- subscriptions --------------------
    def subscribe(self, listener: ViewListener) -> None:
        self._view_listeners.append(listener)

    def on_notice(self, listener: NoticeListener) -> None:
        self._notice_listeners.append(listener)

    @property
    def view(self) -> ViewModel:
        return self._view

    def refresh(self) -> ViewModel:
        self._view = render(self.store.tasks)
        for listener in self._view_listeners:
            listener(self._view)
        return self._view

    def _notify(self, message: str) -> None:
        logger.info(message)
        for listener in self._notice_listeners:
            listener(message)

    # -------------------- capabilities --------------------
    def create(self, text: str, priority: Any = None) -> Optional[Task]:
        task = self.store.create(text, priority)
        if task is not None:
            self.refresh()
            self._notify(f'Added "{task.text}"')
        return task

    def toggle(self, task_id: int) -> Optional[Task]:
        task = self.store.toggle(task_id)
        if task is not None:
            self.refresh()
        return task

    def delete(self, task_id: int) -> bool:
        removed = self.store.delete(task_id)
        if removed:
            self.refresh()
            self._notify('Task deleted')
        return removed

    def clear_completed(self) -> int:
        count = self.store.clear_completed()
        if count:
            self.refresh()
            noun = 'task' if count == 1 else 'tasks'
            self._notify(f'Cleared {count} completed {noun}')
        return count

    def task_id_at(self, position: int) -> Optional[int]:
        """Resolve a 1-based display position to a task id."""
        item = self._view.task_at(position)
        return item.id if item is not None else None
