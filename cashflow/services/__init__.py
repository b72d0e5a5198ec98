"""Services package."""

from cashflow.services.storage import (
    BudgetRepository,
    FileBackend,
    GoalRepository,
    InMemoryBackend,
    KeyValueBackend,
    KeyValueStore,
    StorageError,
    StorageResult,
    TransactionRepository,
    UnavailableBackend,
    create_backend,
)

__all__ = [
    "BudgetRepository",
    "FileBackend",
    "GoalRepository",
    "InMemoryBackend",
    "KeyValueBackend",
    "KeyValueStore",
    "StorageError",
    "StorageResult",
    "TransactionRepository",
    "UnavailableBackend",
    "create_backend",
]
