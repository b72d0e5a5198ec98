"""
Budget Engine

Merges live category spend with the user's monthly limits.

For each category and month:
    spent      = expense total of the month's transactions in that category
    limit      = the category's monthly_limit for that month, or 0
    percentage = spent / limit * 100 when limit > 0, else 0
    remaining  = max(0, limit - spent)
    over       = spent > limit and limit > 0
    warning    = warn_at < percentage <= 100

A category without a budget (limit 0) is untracked, not "zero tolerance":
it never goes over budget and never warns.
"""

from typing import Iterable, Optional, Sequence

from cashflow.config import get_settings
from cashflow.engines.aggregation import filter_by_interval, month_bounds, spend_by_category
from cashflow.models.finance import EXPENSE_CATEGORIES, Budget, Transaction
from cashflow.models.reports import BudgetOverview, BudgetStatus


def category_status(
    category: str,
    spent: float,
    limit: float,
    warning_percent: float,
) -> BudgetStatus:
    percentage = (spent / limit) * 100 if limit > 0 else 0.0
    return BudgetStatus(
        category=category,
        spent=spent,
        limit=limit,
        percentage=percentage,
        remaining=max(0.0, limit - spent),
        is_over_budget=spent > limit and limit > 0,
        has_warning=warning_percent < percentage <= 100,
    )


def budget_status(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    month: str,
    categories: Sequence[str] = EXPENSE_CATEGORIES,
    warning_percent: Optional[float] = None,
) -> list[BudgetStatus]:
    """
    One status row per category, in catalogue order.

    Only transactions dated inside `month` count; only budgets for `month`
    apply.
    """
    if warning_percent is None:
        warning_percent = get_settings().app.budget_warning_percent

    start, end = month_bounds(month)
    spending = spend_by_category(filter_by_interval(transactions, start, end))
    limits = {b.category: b.monthly_limit for b in budgets if b.month == month}

    return [
        category_status(
            category=category,
            spent=spending.get(category, 0.0),
            limit=limits.get(category, 0.0),
            warning_percent=warning_percent,
        )
        for category in categories
    ]


def budget_overview(rows: Iterable[BudgetStatus], month: str) -> BudgetOverview:
    """Header totals; total_remaining goes negative when overspent."""
    rows = list(rows)
    total_budget = sum(r.limit for r in rows)
    total_spent = sum(r.spent for r in rows)
    return BudgetOverview(
        month=month,
        rows=rows,
        total_budget=total_budget,
        total_spent=total_spent,
        total_remaining=total_budget - total_spent,
    )
