from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from typing import Dict, Optional

from .errors import StorageDecodeFailed

logger = logging.getLogger("gnews")


class MemoryPreferences:
    """In-memory preferences region, used as a test double."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(values or {})

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def put_string(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class FilePreferences:
    """A named preferences region stored as one JSON object of string values.

    Every write replaces the whole file: the new content is written to a
    temporary file next to it and moved over the old one with ``os.replace``,
    so readers only ever see the previous or the new region.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except IOError as e:
            logger.warning("Failed to read preferences file %s: %s", self.path, e)
            raise StorageDecodeFailed(f"cannot read {self.path}: {e}") from e
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Preferences file %s is corrupt: %s", self.path, e)
            raise StorageDecodeFailed(f"corrupt preferences file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageDecodeFailed(f"preferences file {self.path} is not a JSON object")
        return data

    def _write(self, values: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".prefs-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(values, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug("Wrote preferences file %s", self.path)

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with self._lock:
            values = self._read()
        if key not in values:
            return default
        value = values[key]
        if not isinstance(value, str):
            logger.error("Preferences key %r in %s is not a string", key, self.path)
            raise StorageDecodeFailed(f"preferences key {key!r} in {self.path} is not a string")
        return value

    def put_string(self, key: str, value: str) -> None:
        with self._lock:
            values = self._read()
            values[key] = value
            self._write(values)

    def remove(self, key: str) -> None:
        with self._lock:
            values = self._read()
            if key in values:
                del values[key]
                self._write(values)
