"""
Storage Services Package

Provides the abstract key-value backend interface, the local backends,
the failure-tolerant JSON store on top of them, and the scoped
repositories the rest of the package reads and writes through.
"""

from cashflow.services.storage.interface import (
    BackendUnavailableError,
    CashflowError,
    KeyValueBackend,
    QuotaExceededError,
    StorageError,
    StorageErrorKind,
    StorageReadError,
    StorageResult,
    StorageWriteError,
)
from cashflow.services.storage.backends import (
    FileBackend,
    InMemoryBackend,
    UnavailableBackend,
    create_backend,
)
from cashflow.services.storage.adapter import KeyValueStore
from cashflow.services.storage.keys import (
    APP_VERSION_KEY,
    BUDGETS_KEY,
    CURRENT_USER_KEY,
    FINANCIAL_GOALS_KEY,
    TRANSACTIONS_KEY,
    USER_SCOPED_KEYS,
)
from cashflow.services.storage.repositories import (
    BudgetRepository,
    GoalRepository,
    TransactionRepository,
    default_goals,
)

__all__ = [
    # Interface
    "KeyValueBackend",
    "StorageErrorKind",
    "StorageResult",
    # Exceptions
    "BackendUnavailableError",
    "CashflowError",
    "QuotaExceededError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Backends
    "FileBackend",
    "InMemoryBackend",
    "UnavailableBackend",
    "create_backend",
    # Store
    "KeyValueStore",
    # Keys
    "APP_VERSION_KEY",
    "BUDGETS_KEY",
    "CURRENT_USER_KEY",
    "FINANCIAL_GOALS_KEY",
    "TRANSACTIONS_KEY",
    "USER_SCOPED_KEYS",
    # Repositories
    "BudgetRepository",
    "GoalRepository",
    "TransactionRepository",
    "default_goals",
]
