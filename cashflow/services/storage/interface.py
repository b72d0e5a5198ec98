"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for the key-value medium.
This allows us to:
1. Keep data in plain files on disk for everyday use
2. Use in-memory storage for testing
3. Run with no durable medium at all (everything falls back to defaults)
4. Keep repositories and engines decoupled from where bytes live

The interface is intentionally tiny - text in, text out, by key.
JSON encoding, defaults and failure tolerance live one level up in
KeyValueStore.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class KeyValueBackend(ABC):
    """
    Abstract interface for a synchronous local key-value medium.

    Any backend (memory, files, ...) must implement these methods.
    Backends raise StorageError subclasses; they never swallow failures.
    """

    @property
    def available(self) -> bool:
        """Whether a durable medium exists at all."""
        return True

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the raw text stored under a key.

        Returns:
            The stored text, or None if the key is absent

        Raises:
            BackendUnavailableError: If there is no medium to read from
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    def write(self, key: str, text: str) -> None:
        """
        Store raw text under a key, replacing any previous value.

        Raises:
            BackendUnavailableError: If there is no medium to write to
            QuotaExceededError: If the medium is full
            StorageWriteError: If the write fails for any other reason
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """All keys currently held by the medium."""
        pass


class StorageErrorKind(str, Enum):
    """Why a storage call fell back to a default or failed to persist."""
    MISSING = "missing"
    DECODE_ERROR = "decode_error"
    UNAVAILABLE = "unavailable"
    QUOTA_EXCEEDED = "quota_exceeded"
    WRITE_ERROR = "write_error"
    READ_ERROR = "read_error"


class StorageResult(BaseModel):
    """
    Outcome of a KeyValueStore call.

    Storage failures are never raised to callers; they come back here so
    callers and tests can see them. `value` is always usable: the stored
    value on success, the caller's default or the in-memory value on
    failure.
    """

    key: str
    value: Any = None
    error_kind: Optional[StorageErrorKind] = None
    error_message: Optional[str] = Field(
        default=None,
        description="Underlying error text when error_kind is set"
    )

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @property
    def is_missing(self) -> bool:
        return self.error_kind == StorageErrorKind.MISSING


class CashflowError(Exception):
    """Base exception for every error raised by this package."""
    pass


class StorageError(CashflowError):
    """Base exception for storage operations."""

    kind: StorageErrorKind = StorageErrorKind.WRITE_ERROR


class BackendUnavailableError(StorageError):
    """No durable medium exists in this environment."""

    kind = StorageErrorKind.UNAVAILABLE


class QuotaExceededError(StorageError):
    """The medium refused a write because it is full."""

    kind = StorageErrorKind.QUOTA_EXCEEDED


class StorageWriteError(StorageError):
    """A write failed for a reason other than quota."""

    kind = StorageErrorKind.WRITE_ERROR


class StorageReadError(StorageError):
    """The medium failed to return a stored value."""

    kind = StorageErrorKind.READ_ERROR
