"""Derivation engines: aggregation, budgets and goals."""

from cashflow.engines.aggregation import (
    count_by_type,
    distinct_categories,
    filter_by_interval,
    month_bounds,
    month_key,
    month_label,
    monthly_overview,
    monthly_totals,
    search_transactions,
    sort_newest_first,
    spend_by_category,
    summarize,
)
from cashflow.engines.budgets import budget_overview, budget_status, category_status
from cashflow.engines.goals import goal_overview, goal_progress, goal_status

__all__ = [
    "budget_overview",
    "budget_status",
    "category_status",
    "count_by_type",
    "distinct_categories",
    "filter_by_interval",
    "goal_overview",
    "goal_progress",
    "goal_status",
    "month_bounds",
    "month_key",
    "month_label",
    "monthly_overview",
    "monthly_totals",
    "search_transactions",
    "sort_newest_first",
    "spend_by_category",
    "summarize",
]
