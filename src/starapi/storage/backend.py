"""
Key-Value Storage Backends

Provides the named-slot persistence used by the endpoint store: an in-memory
implementation and a single JSON document on disk.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from ..core.exceptions import StorageError
from ..core.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """Named string slots; writes fully replace the previous value."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the slot's value, or None if it was never written."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the slot's value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete the slot if present."""


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._slots: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value

    def remove(self, key: str) -> None:
        self._slots.pop(key, None)


class JSONFileKeyValueStore(KeyValueStore):
    """
    Key-value slots kept in one JSON document on disk.

    The document is an object mapping slot names to string values. Every
    write rewrites the whole file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    def _read_slots(self) -> Dict[str, str]:
        """Read the slot document with error handling."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError(f"Invalid JSON in {self.path}: {e}")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}")

        if not isinstance(data, dict):
            raise StorageError(
                f"Invalid storage document in {self.path}",
                {"type": type(data).__name__},
            )
        return data

    def _write_slots(self, slots: Dict[str, str]) -> None:
        """Write the slot document with error handling."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(slots, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}")

    def get(self, key: str) -> Optional[str]:
        value = self._read_slots().get(key)
        if value is not None and not isinstance(value, str):
            raise StorageError(f"Slot '{key}' in {self.path} does not hold a string")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            slots = self._read_slots()
        except StorageError as e:
            logger.warning(f"Discarding unreadable storage document: {e}")
            slots = {}
        slots[key] = value
        self._write_slots(slots)

    def remove(self, key: str) -> None:
        slots = self._read_slots()
        if key in slots:
            del slots[key]
            self._write_slots(slots)
