"""
Derived Report Models

Everything here is computed from stored records on every read and is never
persisted. The engines in cashflow.engines produce these; a UI layer only
renders them.
"""

from datetime import date

from pydantic import BaseModel, Field

from cashflow.models.finance import FinancialGoal, Transaction


class CashflowSummary(BaseModel):
    """Income, expenses and net cashflow over a set of transactions."""

    income: float = 0.0
    expenses: float = 0.0
    net: float = 0.0


class MonthlyOverview(BaseModel):
    """One calendar month: its transactions and their summary."""

    month: str
    start: date
    end: date
    summary: CashflowSummary
    transactions: list[Transaction] = Field(default_factory=list)


class MonthlyTotals(BaseModel):
    """One bar of the month-by-month cashflow chart."""

    month: str = Field(..., description="Month key, YYYY-MM")
    label: str = Field(..., description="Display label, e.g. 'Jan 2024'")
    income: float = 0.0
    expenses: float = 0.0
    net: float = 0.0


class BudgetStatus(BaseModel):
    """
    Live status of one expense category against its monthly limit.

    A category with no budget (limit 0) is untracked: it is never over
    budget and never warns, whatever it spent.
    """

    category: str
    spent: float
    limit: float
    percentage: float
    remaining: float
    is_over_budget: bool
    has_warning: bool


class BudgetOverview(BaseModel):
    """All category rows for a month plus the header totals."""

    month: str
    rows: list[BudgetStatus] = Field(default_factory=list)
    total_budget: float = 0.0
    total_spent: float = 0.0
    total_remaining: float = Field(
        default=0.0,
        description="total_budget - total_spent; negative when overspent"
    )


class GoalStatus(BaseModel):
    """
    Progress and deadline flags for one goal.

    The flags are computed independently; a completed goal may also be
    overdue. Presentation decides which one wins.
    """

    goal: FinancialGoal
    progress: float = Field(..., description="Percent of target, unbounded above 100")
    days_left: int = Field(..., ge=0, description="Whole days to or past the deadline")
    is_overdue: bool
    is_near_deadline: bool
    is_completed: bool


class GoalOverview(BaseModel):
    """All goals with their status plus aggregate progress."""

    statuses: list[GoalStatus] = Field(default_factory=list)
    total_target: float = 0.0
    total_current: float = 0.0
    overall_progress: float = 0.0
