"""
Shared fixtures.

Every test gets settings rebuilt from a clean environment and an
in-memory medium, so nothing leaks between tests or from the host.
"""

import os
from datetime import date

import pytest

from cashflow.audit import AuditLogger
from cashflow.config import get_settings
from cashflow.models.finance import Transaction, TransactionType
from cashflow.orchestrator import create_app
from cashflow.services.storage import InMemoryBackend, KeyValueStore


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    """Drop CASHFLOW_* variables and any cached settings."""
    for name in list(os.environ):
        if name.startswith("CASHFLOW_"):
            monkeypatch.delenv(name)
    # keep a stray .env in the working directory out of the picture
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def store(backend, audit_logger):
    return KeyValueStore(backend, audit_logger=audit_logger)


@pytest.fixture
def app(backend, audit_logger):
    return create_app(backend=backend, audit_logger=audit_logger, configure_logs=False)


@pytest.fixture
def make_transaction():
    """Factory for stored transactions with sensible defaults."""

    def _make(
        day: date = date(2024, 1, 15),
        amount: float = 25000,
        type: TransactionType = TransactionType.EXPENSE,
        category: str = "Makanan",
        description: str = "Coffee",
    ) -> Transaction:
        return Transaction(
            date=day,
            description=description,
            amount=amount,
            type=type,
            category=category,
        )

    return _make
