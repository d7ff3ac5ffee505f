"""Persistence helpers for the to-do list.

LocalStorage is a small key-value file: one JSON object mapping string keys
to string values. The task collection is stored as a JSON array string under
a single fixed key, so the file can hold other slots side by side.

Reads never raise: a missing, unreadable or corrupt file counts as "no data".
Stored entries that cannot be read as tasks are set aside and written back
unchanged after the tasks on every save.
Writes go through a temp file + rename and raise StorageError on failure.
"""
from __future__ import annotations
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from config import DEFAULT_STORAGE_KEY, DEFAULT_STORAGE_PATH
from models import Task

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage file cannot be written."""


class LocalStorage:
    """String key-value slots persisted in a single JSON file."""

    def __init__(self, path: Path = DEFAULT_STORAGE_PATH):
        self.path = Path(path)

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            logger.warning("Slot %r in %s is not a string; ignoring it", key, self.path)
            return None
        return value

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Storage file %s is unreadable (%s); treating it as empty", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s does not hold an object; treating it as empty", self.path)
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix='.storage-', suffix='.tmp', dir=str(self.path.parent))
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=4, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            logger.error("Could not write storage file %s: %s", self.path, exc)
            raise StorageError(f"could not write {self.path}: {exc}") from exc


class Storage:
    """Task collection codec bound to one LocalStorage slot."""

    def __init__(self, backend: LocalStorage, key: str = DEFAULT_STORAGE_KEY):
        self.backend = backend
        self.key = key
        self.set_aside: List[Any] = []

    @classmethod
    def at(cls, path: Path, key: str = DEFAULT_STORAGE_KEY) -> 'Storage':
        return cls(LocalStorage(path), key)

    def load_tasks(self) -> List[Task]:
        """Load the task collection.

        Missing slot or a value that is not a JSON array -> empty list.
        Records that cannot be read as tasks are skipped here and kept in
        set_aside for the next save.
        """
        self.set_aside = []
        raw = self.backend.get_item(self.key)
        if raw is None:
            return []
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Slot %r holds invalid JSON (%s); starting empty", self.key, exc)
            return []
        if not isinstance(entries, list):
            logger.warning("Slot %r does not hold a list; starting empty", self.key)
            return []
        return list(_parse_entries(entries, self.set_aside))

    def save_tasks(self, tasks: Iterable[Task]) -> None:
        """Persist the whole collection, overwriting the slot."""
        entries: List[Any] = [task.to_dict() for task in tasks]
        entries.extend(self.set_aside)
        self.backend.set_item(self.key, json.dumps(entries, ensure_ascii=False))


def _parse_entries(entries: List[Any], rejected: List[Any]) -> Iterable[Task]:
    for index, raw in enumerate(entries):
        if not isinstance(raw, dict):
            logger.warning("Setting aside stored entry #%d: not an object", index)
            rejected.append(raw)
            continue
        try:
            yield Task.from_dict(raw)
        except ValueError as exc:
            logger.warning("Setting aside stored entry #%d: %s", index, exc)
            rejected.append(raw)
