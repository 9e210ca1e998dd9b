"""JSON file store — durable KeyValueStore on the local filesystem.

Each key is one ``<key>.json`` file under a base directory. Writes go to a
temporary file in the same directory and are swapped in with ``os.replace``,
so a reader sees either the old document or the new one, never half of one.
Values survive process restarts.

No locking: two processes writing the same key race, and the last
``os.replace`` wins.

Tier 2 service module: imports from attendance_tracker.hooks.interfaces (Tier 1).

Usage:
    from attendance_tracker.hooks.storage import JsonFileStore

    store = JsonFileStore()                         # default: ./data
    store = JsonFileStore(base_path="/var/lib/at")  # custom path
    store.write("attendance", [])
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from attendance_tracker.hooks.interfaces import KeyValueStore

logger = logging.getLogger("attendance_tracker.hooks.storage")


class JsonFileStore(KeyValueStore):
    """Stores one JSON document per key under ``base_path``.

    The directory is created lazily on the first write.
    """

    def __init__(self, base_path: str = "data") -> None:
        """Initialises with a base directory for the key files.

        Args:
            base_path: Directory holding ``<key>.json`` files. Resolved to a
                Path object internally. Defaults to "data" relative to the
                working directory.
        """
        self._base_path = Path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base_path

    def _path_for(self, key: str) -> Path:
        return self._base_path / f"{key}.json"

    def get(self, key: str) -> Any | None:
        """Reads and parses the file for key.

        Args:
            key: The collection or pointer name.

        Returns:
            The parsed document, or None if no file exists for key.
        """
        path = self._path_for(key)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def put(self, key: str, value: Any) -> None:
        """Atomically replaces the file for key with the serialized value.

        Creates the base directory if it doesn't exist.

        Args:
            key: The collection or pointer name.
            value: A JSON-serializable document.
        """
        self._base_path.mkdir(parents=True, exist_ok=True)
        target = self._path_for(key)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._base_path, prefix=f".{key}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(value, handle, indent=2, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %s", target)

    def remove(self, key: str) -> None:
        """Deletes the file for key. No-op if not found (idempotent).

        Args:
            key: The collection or pointer name.
        """
        self._path_for(key).unlink(missing_ok=True)

    def has(self, key: str) -> bool:
        """Returns True if a file exists for key."""
        return self._path_for(key).exists()
