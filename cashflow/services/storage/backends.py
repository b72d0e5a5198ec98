"""
Local Key-Value Backends

DESIGN DECISION: Three interchangeable media back the tracker:
1. InMemoryBackend - a dict, optionally with a byte quota (tests, demos)
2. FileBackend - one UTF-8 file per key in a directory (everyday use)
3. UnavailableBackend - no durable medium at all (every call refuses)

TRADEOFFS:
- No locking: two processes on the same directory overwrite each other,
  last write wins, nothing detects it
- Writes are not atomic beyond what a single file write gives us
"""

from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote, unquote

from cashflow.config import StorageSettings, get_settings
from cashflow.services.storage.interface import (
    BackendUnavailableError,
    KeyValueBackend,
    QuotaExceededError,
    StorageReadError,
    StorageWriteError,
)


class InMemoryBackend(KeyValueBackend):
    """
    Dict-backed medium.

    With `quota_bytes` set, a write that would push the total UTF-8 size
    of all keys and values past the quota raises QuotaExceededError and
    leaves the previous value in place.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self._data: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def _size_with(self, key: str, text: str) -> int:
        total = 0
        for k, v in self._data.items():
            if k == key:
                continue
            total += len(k.encode("utf-8")) + len(v.encode("utf-8"))
        return total + len(key.encode("utf-8")) + len(text.encode("utf-8"))

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, text: str) -> None:
        if self._quota_bytes is not None and self._size_with(key, text) > self._quota_bytes:
            raise QuotaExceededError(
                f"Writing {key} would exceed the {self._quota_bytes} byte quota"
            )
        self._data[key] = text

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileBackend(KeyValueBackend):
    """
    Directory-backed medium, one file per key.

    Key names are percent-encoded into file names so any key string maps
    to exactly one file.
    """

    SUFFIX = ".json"

    def __init__(self, directory: Union[Path, str]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        return self._directory / f"{quote(key, safe='')}{self.SUFFIX}"

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}") from e

    def write(self, key: str, text: str) -> None:
        path = self._path(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise StorageWriteError(f"Failed to write {path}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Failed to remove {key}: {e}") from e

    def keys(self) -> list[str]:
        if not self._directory.is_dir():
            return []
        return sorted(
            unquote(p.name[: -len(self.SUFFIX)])
            for p in self._directory.iterdir()
            if p.is_file() and p.name.endswith(self.SUFFIX)
        )


class UnavailableBackend(KeyValueBackend):
    """
    Stand-in for environments with no durable storage.

    Every call raises BackendUnavailableError; KeyValueStore turns that
    into defaults on read and reported failures on write.
    """

    @property
    def available(self) -> bool:
        return False

    def read(self, key: str) -> Optional[str]:
        raise BackendUnavailableError("No persistent storage in this environment")

    def write(self, key: str, text: str) -> None:
        raise BackendUnavailableError("No persistent storage in this environment")

    def remove(self, key: str) -> None:
        raise BackendUnavailableError("No persistent storage in this environment")

    def keys(self) -> list[str]:
        return []


def create_backend(
    backend: Optional[str] = None,
    storage_settings: Optional[StorageSettings] = None,
) -> KeyValueBackend:
    """
    Build the backend named in settings (or the one passed in).

    Args:
        backend: 'memory', 'file' or 'unavailable'. Defaults to settings.
        storage_settings: Settings to read data_dir and quota_bytes from.
    """
    storage_settings = storage_settings or get_settings().storage
    name = backend or storage_settings.backend

    if name == "memory":
        return InMemoryBackend(quota_bytes=storage_settings.quota_bytes)
    if name == "file":
        return FileBackend(storage_settings.data_dir)
    if name == "unavailable":
        return UnavailableBackend()
    raise ValueError(f"Unknown storage backend: {name}")
