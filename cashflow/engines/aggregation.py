"""
Aggregation Engine

Pure functions over lists of transactions: interval filtering, income and
expense totals, per-category spend, month-by-month totals and the list
filters the transaction view offers.

DESIGN DECISION: Nothing is cached or maintained incrementally. Every view
recomputes from the stored list; one person's transactions are a small
list, so a linear pass per read is the simple and correct choice.
"""

import calendar
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Union

from cashflow.models.finance import MONTH_KEY_PATTERN, Transaction, TransactionType
from cashflow.models.reports import CashflowSummary, MonthlyOverview, MonthlyTotals


_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def month_bounds(key: str) -> tuple[date, date]:
    """First and last day of a "YYYY-MM" month."""
    if not MONTH_KEY_PATTERN.match(key):
        raise ValueError(f"Month must look like YYYY-MM, got {key!r}")
    year, month = int(key[:4]), int(key[5:7])
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_label(key: str) -> str:
    """'2024-01' -> 'Jan 2024'"""
    start, _ = month_bounds(key)
    return f"{_MONTH_ABBR[start.month - 1]} {start.year}"


def filter_by_interval(
    transactions: Iterable[Transaction],
    start: date,
    end: date,
) -> list[Transaction]:
    """Transactions dated within [start, end], in their original order."""
    return [t for t in transactions if start <= t.date <= end]


def summarize(transactions: Iterable[Transaction]) -> CashflowSummary:
    income = 0.0
    expenses = 0.0
    for t in transactions:
        if t.type == TransactionType.INCOME:
            income += t.amount
        else:
            expenses += t.amount
    return CashflowSummary(income=income, expenses=expenses, net=income - expenses)


def spend_by_category(transactions: Iterable[Transaction]) -> dict[str, float]:
    """
    Expense totals per category.

    Income is ignored; categories with no expenses are absent, not zero.
    """
    totals: dict[str, float] = defaultdict(float)
    for t in transactions:
        if t.type == TransactionType.EXPENSE:
            totals[t.category] += t.amount
    return dict(totals)


def monthly_overview(transactions: Iterable[Transaction], key: str) -> MonthlyOverview:
    """Summary and transactions of one calendar month."""
    start, end = month_bounds(key)
    in_month = filter_by_interval(transactions, start, end)
    return MonthlyOverview(
        month=key,
        start=start,
        end=end,
        summary=summarize(in_month),
        transactions=in_month,
    )


def _iter_month_keys(first: date, last: date) -> Iterable[str]:
    year, month = first.year, first.month
    while (year, month) <= (last.year, last.month):
        yield f"{year:04d}-{month:02d}"
        month += 1
        if month > 12:
            year, month = year + 1, 1


def monthly_totals(transactions: Iterable[Transaction]) -> list[MonthlyTotals]:
    """
    One row per month from the earliest to the latest transaction.

    Months with no transactions in between are included with zeros.
    """
    transactions = list(transactions)
    if not transactions:
        return []

    by_month: dict[str, list[Transaction]] = defaultdict(list)
    for t in transactions:
        by_month[month_key(t.date)].append(t)

    first = min(t.date for t in transactions)
    last = max(t.date for t in transactions)

    rows = []
    for key in _iter_month_keys(first, last):
        summary = summarize(by_month.get(key, []))
        rows.append(MonthlyTotals(
            month=key,
            label=month_label(key),
            income=summary.income,
            expenses=summary.expenses,
            net=summary.net,
        ))
    return rows


def search_transactions(
    transactions: Iterable[Transaction],
    term: str = "",
    type_filter: Optional[Union[TransactionType, str]] = None,
    category_filter: Optional[str] = None,
) -> list[Transaction]:
    """
    Filters of the transaction list view.

    - term: case-insensitive substring of description or category
    - type_filter / category_filter: exact match; None or "all" disables
    """
    needle = term.strip().lower()
    if type_filter == "all":
        type_filter = None
    if category_filter == "all":
        category_filter = None
    if type_filter is not None:
        type_filter = TransactionType(type_filter)

    matches = []
    for t in transactions:
        if needle and needle not in t.description.lower() and needle not in t.category.lower():
            continue
        if type_filter is not None and t.type != type_filter:
            continue
        if category_filter is not None and t.category != category_filter:
            continue
        matches.append(t)
    return matches


def distinct_categories(transactions: Iterable[Transaction]) -> list[str]:
    """Categories in order of first appearance."""
    return list(dict.fromkeys(t.category for t in transactions))


def sort_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    # sorted() is stable with reverse=True, so same-day entries keep their order
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def count_by_type(transactions: Iterable[Transaction]) -> dict[str, int]:
    counts = {TransactionType.INCOME.value: 0, TransactionType.EXPENSE.value: 0}
    for t in transactions:
        counts[t.type.value] += 1
    return counts
