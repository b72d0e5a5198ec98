"""
Core Data Models for Cashflow

These models define the schemas of everything the tracker persists:
transactions, monthly budgets, financial goals and the local user.
They are designed to:
1. Enforce the record invariants at runtime (positive amounts, real dates)
2. Round-trip through the key-value store as camelCase JSON
3. Keep Python code snake_case

DESIGN DECISION: Persisted JSON uses camelCase field names
(monthlyLimit, isRecurring, ...) so existing stores and backups load as-is.
Every model accepts both spellings on input and writes camelCase on output.
"""

import re
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


MONTH_KEY_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


# =============================================================================
# CATEGORY CATALOGUES
# =============================================================================

INCOME_CATEGORIES: tuple[str, ...] = (
    "Gaji",
    "Freelance",
    "Investasi",
    "Bisnis",
    "Pendapatan Lain",
)

EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Rumah/Sewa",
    "Makanan",
    "Transportasi",
    "Listrik/Air",
    "Kesehatan",
    "Hiburan",
    "Belanja",
    "Pengeluaran Lain",
)

GOAL_CATEGORIES: tuple[str, ...] = (
    "Emergency Fund",
    "Vacation",
    "House Down Payment",
    "Car",
    "Education",
    "Investment",
    "Retirement",
    "Other",
)


def new_record_id() -> str:
    """Generate an opaque unique id for a stored record."""
    return str(uuid4())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a money movement."""
    INCOME = "income"
    EXPENSE = "expense"


class RecurringFrequency(str, Enum):
    """How often a recurring transaction repeats."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class StoredModel(BaseModel):
    """
    Base for every persisted record.

    Reads snake_case or camelCase, writes camelCase.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_storage(self) -> dict[str, Any]:
        """Convert to the JSON-ready dict written to the key-value store."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionDraft(StoredModel):
    """
    A transaction before it has an id.

    Produced by the transaction form and by edits; the repository assigns
    or preserves the id when it stores one.
    """

    date: date
    description: str
    amount: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Always positive; direction comes from type"
    )
    type: TransactionType
    category: str
    is_recurring: Optional[bool] = None
    recurring_frequency: Optional[RecurringFrequency] = None
    tags: Optional[list[str]] = None


class TransactionForm(BaseModel):
    """
    Raw values from the add/edit transaction form.

    Looser than TransactionDraft: blank text and a zero amount are
    representable, so the facade can ignore an incomplete submission
    instead of raising.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    date: date
    description: str = ""
    amount: float = 0.0
    type: TransactionType = TransactionType.EXPENSE
    category: str = ""
    is_recurring: Optional[bool] = None
    recurring_frequency: Optional[RecurringFrequency] = None
    tags: Optional[list[str]] = None

    def missing_fields(self) -> list[str]:
        """Names of the fields that stop this form from being saved."""
        missing = []
        if not self.description:
            missing.append("description")
        if not self.category:
            missing.append("category")
        if not (self.amount > 0) or self.amount == float("inf"):
            missing.append("amount")
        return missing

    def to_draft(self) -> TransactionDraft:
        return TransactionDraft(**self.model_dump(exclude_none=True))


class Transaction(TransactionDraft):
    """A single dated money movement, income or expense."""

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Unique opaque id"
    )

    @classmethod
    def from_draft(cls, draft: TransactionDraft, record_id: Optional[str] = None) -> "Transaction":
        fields = draft.model_dump(exclude_none=True)
        if record_id is not None:
            fields["id"] = record_id
        return cls(**fields)

    def to_draft(self) -> TransactionDraft:
        return TransactionDraft(**self.model_dump(exclude={"id"}, exclude_none=True))


# =============================================================================
# BUDGETS
# =============================================================================

class Budget(StoredModel):
    """
    Monthly spending limit for one category.

    At most one budget exists per (category, month); `spent` is an advisory
    snapshot taken when the budget was set, the live figure is always
    recomputed from transactions.
    """

    id: str = Field(default_factory=new_record_id, min_length=1)
    category: str = Field(..., min_length=1)
    monthly_limit: float = Field(..., ge=0, allow_inf_nan=False)
    spent: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    month: str = Field(..., description="Month key, YYYY-MM")

    @field_validator('month')
    @classmethod
    def validate_month(cls, v: str) -> str:
        if not MONTH_KEY_PATTERN.match(v):
            raise ValueError(f"Month must look like YYYY-MM, got {v!r}")
        return v


class BudgetForm(BaseModel):
    """Raw values from the set-budget form."""
    model_config = ConfigDict(str_strip_whitespace=True)

    category: str = ""
    monthly_limit: float = 0.0

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.category:
            missing.append("category")
        if not (self.monthly_limit > 0) or self.monthly_limit == float("inf"):
            missing.append("monthly_limit")
        return missing


# =============================================================================
# FINANCIAL GOALS
# =============================================================================

class GoalDraft(StoredModel):
    """A savings goal before it has an id."""

    title: str = Field(..., min_length=1)
    target_amount: float = Field(..., gt=0, allow_inf_nan=False)
    current_amount: float = Field(
        default=0.0,
        ge=0,
        allow_inf_nan=False,
        description="May exceed target_amount (over-saving is allowed)"
    )
    deadline: date
    category: str = Field(..., min_length=1)
    description: Optional[str] = None


class GoalForm(BaseModel):
    """
    Raw values from the add-goal form.

    Blank title or category and a zero target are representable so an
    incomplete submission can be ignored. The deadline defaults to today.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = ""
    target_amount: float = 0.0
    current_amount: float = 0.0
    deadline: date = Field(default_factory=date.today)
    category: str = ""
    description: Optional[str] = None

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.title:
            missing.append("title")
        if not (self.target_amount > 0) or self.target_amount == float("inf"):
            missing.append("target_amount")
        if not (0 <= self.current_amount < float("inf")):
            missing.append("current_amount")
        if not self.category:
            missing.append("category")
        return missing

    def to_draft(self) -> GoalDraft:
        return GoalDraft(**self.model_dump(exclude_none=True))


class FinancialGoal(GoalDraft):
    """A savings goal with a target amount and a deadline."""

    id: str = Field(default_factory=new_record_id, min_length=1)


# =============================================================================
# USER
# =============================================================================

class User(StoredModel):
    """
    The single local user of this device.

    Exactly zero or one user exists at a time; its id suffixes every
    storage key holding that user's data.
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
