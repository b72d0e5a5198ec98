"""
Data Models Package

This package contains all Pydantic models used in Cashflow.
All data flowing through the system must conform to these schemas.
"""

from cashflow.models.finance import (
    EXPENSE_CATEGORIES,
    GOAL_CATEGORIES,
    INCOME_CATEGORIES,
    Budget,
    BudgetForm,
    FinancialGoal,
    GoalDraft,
    GoalForm,
    RecurringFrequency,
    Transaction,
    TransactionDraft,
    TransactionForm,
    TransactionType,
    User,
    new_record_id,
)
from cashflow.models.reports import (
    BudgetOverview,
    BudgetStatus,
    CashflowSummary,
    GoalOverview,
    GoalStatus,
    MonthlyOverview,
    MonthlyTotals,
)
from cashflow.models.transfer import (
    BackupSnapshot,
    ImportPreview,
    ValidationIssue,
)
from cashflow.models.session import Session
from cashflow.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Catalogues
    "EXPENSE_CATEGORIES",
    "GOAL_CATEGORIES",
    "INCOME_CATEGORIES",
    # Stored models
    "Budget",
    "BudgetForm",
    "FinancialGoal",
    "GoalDraft",
    "GoalForm",
    "RecurringFrequency",
    "Transaction",
    "TransactionDraft",
    "TransactionForm",
    "TransactionType",
    "User",
    "new_record_id",
    # Derived models
    "BudgetOverview",
    "BudgetStatus",
    "CashflowSummary",
    "GoalOverview",
    "GoalStatus",
    "MonthlyOverview",
    "MonthlyTotals",
    # Transfer models
    "BackupSnapshot",
    "ImportPreview",
    "ValidationIssue",
    # Session
    "Session",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
