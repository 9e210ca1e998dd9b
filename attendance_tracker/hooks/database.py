"""In-memory key-value store — development stub for KeyValueStore.

Dict-backed storage that keeps each value as JSON text, so every read
deserializes a fresh copy exactly like the file-backed store does. Data lives
only in memory and is lost on restart.

Tier 2 service module: imports from attendance_tracker.hooks.interfaces (Tier 1).

Usage:
    from attendance_tracker.hooks.database import InMemoryKeyValueStore

    store = InMemoryKeyValueStore()
    store.write("courses", [{"id": "1", "name": "Information Technology", "code": "IT"}])
    store.read("courses")
"""

import json
from typing import Any

from attendance_tracker.hooks.interfaces import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """STUB — dict-backed storage, loses data on restart.

    Values are serialized on write, so the serialization contract is the
    same as for JsonFileStore and callers never share live references with
    the store.
    """

    def __init__(self) -> None:
        """Initialises an empty store."""
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        """Returns a fresh copy of the value under key, or None if absent.

        Args:
            key: The collection or pointer name.
        """
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def put(self, key: str, value: Any) -> None:
        """Serializes and stores value under key. Creates or overwrites.

        Args:
            key: The collection or pointer name.
            value: A JSON-serializable document.
        """
        self._data[key] = json.dumps(value)

    def remove(self, key: str) -> None:
        """Deletes key. No-op if not found (idempotent).

        Args:
            key: The collection or pointer name.
        """
        self._data.pop(key, None)

    def has(self, key: str) -> bool:
        """Returns True if key has been written and not removed."""
        return key in self._data
