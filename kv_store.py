"""
Key-Value Store for Session Persistence
=======================================

String keys to string values. The session remembers its text, match-case
flag, enabled statistics and the three rates through this interface.

Backends:
- InMemoryKeyValueStore: nothing survives the process
- JsonFileKeyValueStore: one JSON object on disk, rewritten atomically
"""

import logging
import os
import threading
from pathlib import Path
from typing import Dict, Optional, Union

import json_utils as json

logger = logging.getLogger(__name__)

# Keys used by the document session
TEXT_KEY = "text"
MATCH_CASE_KEY = "match_case"
STATISTICS_OPTIONS_KEY = "statistics_options"
READING_TIME_KEY = "reading_time"
SPEAKING_TIME_KEY = "speaking_time"
HAND_WRITING_TIME_KEY = "hand_writing_time"


class StorageUnavailableError(Exception):
    """Raised when a store backend cannot be read or written."""


class KeyValueStore:
    """Minimal persistence interface."""

    persistent = False

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> bool:
        """Store value. Returns True on success, False when the write failed."""
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store used directly or as the degraded fallback."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        self._data[key] = str(value)
        return True

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Store backed by a single JSON object file.

    The file is read once on construction; every ``set`` rewrites it through a
    temporary file and ``os.replace``. Failures on open raise
    StorageUnavailableError, failures on write are logged and reported as
    False so callers can degrade.
    """

    persistent = True

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._data: Dict[str, str] = self._read()

    def _read(self) -> Dict[str, str]:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                return {}
            raw = self.path.read_bytes()
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot open store at {self.path}: {exc}") from exc

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning(f"Store file {self.path} is not valid JSON ({exc}); starting empty")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Store file {self.path} does not hold an object; starting empty")
            return {}

        return {str(key): str(value) for key, value in data.items() if value is not None}

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        with self._lock:
            self._data[key] = str(value)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            try:
                tmp_path.write_text(json.dumps(self._data, indent=2, sort_keys=True), encoding="utf-8")
                os.replace(tmp_path, self.path)
            except OSError as exc:
                tmp_path.unlink(missing_ok=True)
                logger.error(f"Failed to persist key '{key}' to {self.path}: {exc}")
                return False
        return True

    def snapshot(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._data)


def open_store(path: Optional[Union[str, Path]]) -> KeyValueStore:
    """
    Open the configured store. An empty path or an unusable file location
    gives an in-memory store instead of failing startup.
    """
    if not path:
        logger.info("No store path configured; session state is kept in memory only")
        return InMemoryKeyValueStore()

    try:
        store = JsonFileKeyValueStore(path)
    except StorageUnavailableError as exc:
        logger.warning(f"{exc}. Falling back to an in-memory, non-persisted session")
        return InMemoryKeyValueStore()

    logger.info(f"Session store opened at {store.path}")
    return store
