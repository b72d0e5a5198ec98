"""
Failure-Tolerant JSON Key-Value Store

KeyValueStore sits between the repositories and a KeyValueBackend.
It owns three concerns:
1. JSON encoding and decoding of stored values
2. Defaults for missing or unreadable keys
3. An in-memory mirror of every value read or written

DESIGN DECISION: Availability over consistency. Corrupt or unreachable
storage must never crash the tracker, so nothing here raises. Every
failure is logged and comes back as a StorageResult with an error_kind
that callers and tests can inspect.

KNOWN GAP: When a write fails, the in-memory mirror still holds the new
value. Reads in this process see it; the medium does not. The two stay
diverged until the next successful write of that key.
"""

import copy
import json
from typing import Any, Optional

import structlog

from cashflow.audit import AuditLogger
from cashflow.services.storage.interface import (
    KeyValueBackend,
    StorageError,
    StorageErrorKind,
    StorageResult,
)


class KeyValueStore:
    """
    JSON get/set over a local key-value backend.

    Values are plain JSON-compatible Python data (dicts, lists, strings,
    numbers). Callers get deep copies, so mutating a returned value never
    changes what the store holds.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._backend = backend
        self._audit_logger = audit_logger
        self._mirror: dict[str, Any] = {}
        self._logger = structlog.get_logger("cashflow.storage")

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    def _report(
        self,
        key: str,
        kind: StorageErrorKind,
        message: str,
        value: Any,
    ) -> StorageResult:
        """Log a swallowed failure and wrap it in a result."""
        self._logger.warning(
            "storage_failure",
            key=key,
            error_kind=kind.value,
            error=message,
        )
        if self._audit_logger:
            self._audit_logger.log_storage_failure(key, kind.value, message)
        return StorageResult(
            key=key,
            value=value,
            error_kind=kind,
            error_message=message,
        )

    def get(self, key: str, default: Any = None) -> StorageResult:
        """
        Read and decode the value under `key`.

        Falls back to `default` when the key is missing, the stored text is
        not valid JSON, or there is no medium. Never raises.
        """
        if key in self._mirror:
            return StorageResult(key=key, value=copy.deepcopy(self._mirror[key]))

        try:
            text = self._backend.read(key)
        except StorageError as e:
            return self._report(key, e.kind, str(e), copy.deepcopy(default))

        if text is None:
            self._logger.debug("storage_key_missing", key=key)
            return StorageResult(
                key=key,
                value=copy.deepcopy(default),
                error_kind=StorageErrorKind.MISSING,
            )

        try:
            value = json.loads(text)
        except json.JSONDecodeError as e:
            return self._report(
                key,
                StorageErrorKind.DECODE_ERROR,
                f"Stored value is not valid JSON: {e}",
                copy.deepcopy(default),
            )

        self._mirror[key] = value
        return StorageResult(key=key, value=copy.deepcopy(value))

    def set(self, key: str, value: Any) -> StorageResult:
        """
        Encode and persist `value` under `key`.

        The in-memory mirror is updated before the write is attempted, so
        a failed write still leaves the new value visible to this process.
        Never raises.
        """
        self._mirror[key] = copy.deepcopy(value)

        try:
            text = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            return self._report(
                key,
                StorageErrorKind.WRITE_ERROR,
                f"Value is not JSON serializable: {e}",
                copy.deepcopy(value),
            )

        try:
            self._backend.write(key, text)
        except StorageError as e:
            return self._report(key, e.kind, str(e), copy.deepcopy(value))

        return StorageResult(key=key, value=copy.deepcopy(value))

    def remove(self, key: str) -> StorageResult:
        """Forget `key` in memory and on the medium. Never raises."""
        self._mirror.pop(key, None)

        try:
            self._backend.remove(key)
        except StorageError as e:
            return self._report(key, e.kind, str(e), None)

        return StorageResult(key=key)

    def forget_cached(self, key: Optional[str] = None) -> None:
        """
        Drop mirrored values so the next read goes to the medium.

        Used after another writer may have touched the medium.
        """
        if key is None:
            self._mirror.clear()
        else:
            self._mirror.pop(key, None)
