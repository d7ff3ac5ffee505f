"""Data models for the terminal to-do list.

Exposes the Task dataclass and the Priority enumeration. Stored records use
the camelCase key "createdAt" so files written by older versions of the app
load unchanged. Legacy records may lack "priority"; the field then stays
None and is read as medium only when ranking or displaying.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class Priority(str, Enum):
    """Closed set of task priorities."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]


PRIORITY_RANK: Dict[Priority, int] = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}

PRIORITY_ALIASES: Dict[str, Priority] = {
    'h': Priority.HIGH,
    'high': Priority.HIGH,
    'm': Priority.MEDIUM,
    'medium': Priority.MEDIUM,
    'l': Priority.LOW,
    'low': Priority.LOW,
}

DEFAULT_PRIORITY = Priority.MEDIUM

# keys with their own Task attribute, in write order; anything else is carried in Task.extra
KNOWN_FIELDS = ('id', 'text', 'priority', 'completed', 'createdAt')
# optional fields whose explicit null is kept in Task.extra so it is written back
NULLABLE_FIELDS = ('priority', 'createdAt')


def normalize_priority(raw: Any) -> Priority:
    """Map any raw value to a Priority, falling back to medium."""
    if isinstance(raw, Priority):
        return raw
    if isinstance(raw, str):
        return PRIORITY_ALIASES.get(raw.strip().lower(), DEFAULT_PRIORITY)
    return DEFAULT_PRIORITY


@dataclass
class Task:
    """A single to-do entry.

    Fields:
        id: Unique integer id (creation time in ms, bumped on collisions).
        text: Trimmed, non-empty task text. Never escaped here.
        priority: Stored priority string, or None for legacy records.
        completed: Completion flag.
        created_at: ISO timestamp set once at creation.
        extra: Unknown fields found on the stored record, written back as-is.
    """
    id: int
    text: str
    priority: Optional[str] = DEFAULT_PRIORITY.value
    completed: bool = False
    created_at: Optional[Any] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def effective_priority(self) -> Priority:
        return normalize_priority(self.priority)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'id': self.id, 'text': self.text}
        if self.priority is not None:
            data['priority'] = self.priority
        data['completed'] = self.completed
        if self.created_at is not None:
            data['createdAt'] = self.created_at
        for key, value in self.extra.items():
            data.setdefault(key, value)
        return data

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> 'Task':
        """Build a Task from a stored record.

        Raises ValueError when the record has no integer id or no string text.
        """
        tid = raw.get('id')
        if not isinstance(tid, int) or isinstance(tid, bool):
            raise ValueError(f'record id must be an integer, got {tid!r}')
        text = raw.get('text')
        if not isinstance(text, str):
            raise ValueError(f'record {tid} has no text')
        return cls(
            id=tid,
            text=text,
            priority=raw.get('priority'),
            completed=bool(raw.get('completed', False)),
            created_at=raw.get('createdAt'),
            extra={k: v for k, v in raw.items()
                   if k not in KNOWN_FIELDS or (k in NULLABLE_FIELDS and v is None)},
        )
