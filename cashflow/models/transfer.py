"""
Import/Export Models

CSV imports go through a preview before anything is stored:
parse → ImportPreview (valid rows + row errors) → user confirms → commit.

CRITICAL: A preview with any error cannot be committed, even though its
valid rows are individually fine. The gate is all-or-nothing.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cashflow.models.finance import Budget, FinancialGoal, Transaction


class ValidationIssue(BaseModel):
    """A single problem found while reading an import file."""

    row: Optional[int] = Field(
        default=None,
        ge=1,
        description="1-based line number, None for file-level issues"
    )
    field: str = Field(
        ...,
        description="Field with the issue, or 'header'"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_type', 'invalid_amount')"
    )
    message: str = Field(
        ...,
        description="Human-readable message shown in the preview"
    )


class ImportPreview(BaseModel):
    """
    Result of parsing a CSV import.

    Holds the rows that passed validation and one issue per failing row.
    """

    transactions: list[Transaction] = Field(default_factory=list)
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        """The issue messages, in file order."""
        return [issue.message for issue in self.issues]

    @property
    def has_errors(self) -> bool:
        return bool(self.issues)

    @property
    def can_commit(self) -> bool:
        """True only when there is something to import and nothing failed."""
        return bool(self.transactions) and not self.issues


class BackupSnapshot(BaseModel):
    """
    Full-state backup of one user's data.

    Serialized as {transactions, budgets, financialGoals, exportDate,
    appVersion}. On restore each collection present in the file replaces
    the stored one; collections absent from the file are left alone.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    transactions: Optional[list[Transaction]] = None
    budgets: Optional[list[Budget]] = None
    financial_goals: Optional[list[FinancialGoal]] = None
    export_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    app_version: str = "0.2.0"
