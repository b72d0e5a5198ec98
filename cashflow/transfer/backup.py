"""
JSON Backup

A backup is one user's three collections plus the export time and the
version of the app that wrote it. Loading validates the whole file before
the caller writes anything, so a bad backup never half-applies.
"""

from typing import Optional, Sequence

from pydantic import ValidationError

from cashflow.config import get_settings
from cashflow.models.finance import Budget, FinancialGoal, Transaction
from cashflow.models.transfer import BackupSnapshot
from cashflow.services.storage.interface import CashflowError


class BackupFormatError(CashflowError):
    """The backup text is not JSON or holds records that fail validation."""


def build_snapshot(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    financial_goals: Sequence[FinancialGoal],
    app_version: Optional[str] = None,
) -> BackupSnapshot:
    return BackupSnapshot(
        transactions=list(transactions),
        budgets=list(budgets),
        financial_goals=list(financial_goals),
        app_version=app_version or get_settings().app.app_version,
    )


def dump_snapshot(snapshot: BackupSnapshot) -> str:
    """Indented camelCase JSON."""
    return snapshot.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def load_snapshot(text: str) -> BackupSnapshot:
    """
    Parse backup text.

    Raises:
        BackupFormatError: malformed JSON, a non-object document, or any
            record that fails validation
    """
    try:
        return BackupSnapshot.model_validate_json(text)
    except ValidationError as e:
        raise BackupFormatError(f"Invalid backup file: {e.error_count()} problem(s)") from e
