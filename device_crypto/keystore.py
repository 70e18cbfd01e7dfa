"""
Persistent string key-value stores.

FileKeyStore stands in for the OS settings store: one JSON document holding
string values. Writes go through a temp file and os.replace so a reader never
sees a half-written document.
"""

import os
import json
import logging
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol

from .errors import KeyStoreError

logger = logging.getLogger(__name__)

# One lock per settings file, shared by every FileKeyStore opened on it
_path_locks: dict[Path, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _path_locks_guard:
        return _path_locks.setdefault(path, threading.Lock())


class KeyStore(Protocol):
    """Interface of the persistent settings store."""

    def get_string(self, key: str) -> Optional[str]: ...

    def set_string(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyStore:
    """In-process store, lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get_string(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set_string(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._values)


class FileKeyStore:
    """Settings store persisted as a JSON object on disk."""

    def __init__(self, path: Path):
        """
        Initialize the file-backed store.

        Args:
            path: JSON file holding the settings; created on first write
        """
        self.path = Path(path).resolve()
        self._lock = _lock_for(self.path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise KeyStoreError(f"Settings store at {self.path} is unreadable") from exc

        if not isinstance(data, dict):
            raise KeyStoreError(f"Settings store at {self.path} is not a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".settings-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise KeyStoreError(f"Could not write settings store at {self.path}") from exc

    def get_string(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_string(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._write(data)
        logger.debug("Stored settings entry %s", key)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._write(data)
                logger.debug("Removed settings entry %s", key)
