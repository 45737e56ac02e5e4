"""Key-value storage for build sessions.

StoragePort is the contract the session store writes through. Two
adapters ship with it:
- MemoryStorage for tests and single-process use (optionally with a byte
  quota, mimicking browser localStorage limits)
- FileStorage, one JSON file per key, for local persistence across restarts
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path


class StorageError(Exception):
    """Raised when the underlying store cannot read or write a value."""


class StoragePort(ABC):
    """Abstract key-value storage."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove(self, key: str) -> None: ...


class MemoryStorage(StoragePort):
    """In-memory storage with an optional size quota."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self.quota_bytes = quota_bytes
        self.items: dict[str, str] = {}
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.items.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            used = sum(len(v.encode()) for k, v in self.items.items() if k != key)
            if used + len(value.encode()) > self.quota_bytes:
                raise StorageError("Storage quota exceeded")
        self.items[key] = value
        self.writes += 1

    def remove(self, key: str) -> None:
        self.items.pop(key, None)


class FileStorage(StoragePort):
    """Stores each key as ``<directory>/<key>.json``."""

    _SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not self._SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(str(exc)) from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)
        except OSError as exc:
            raise StorageError(str(exc)) from exc

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(str(exc)) from exc
