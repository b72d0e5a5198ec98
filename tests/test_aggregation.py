"""Tests for the aggregation engine."""

import pytest
from datetime import date

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
from cashflow.models.finance import TransactionType

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


@pytest.fixture
def january(make_transaction):
    return [
        make_transaction(date(2024, 1, 1), 5_000_000, INCOME, "Gaji", "Salary"),
        make_transaction(date(2024, 1, 15), 25_000, EXPENSE, "Makanan", "Coffee"),
        make_transaction(date(2024, 1, 20), 150_000, EXPENSE, "Makanan", "Groceries"),
        make_transaction(date(2024, 1, 31), 300_000, EXPENSE, "Transportasi", "Fuel"),
    ]


class TestIntervals:
    """Tests for interval filtering and month keys."""

    def test_filter_is_inclusive_and_ordered(self, january):
        """Test both ends of the interval are included and order kept."""
        result = filter_by_interval(january, date(2024, 1, 1), date(2024, 1, 20))
        assert [t.description for t in result] == ["Salary", "Coffee", "Groceries"]

    def test_filter_soundness_and_completeness(self, january):
        """Test every kept row is inside and every dropped row is outside."""
        start, end = date(2024, 1, 10), date(2024, 1, 25)
        kept = filter_by_interval(january, start, end)
        assert all(start <= t.date <= end for t in kept)
        dropped = [t for t in january if t not in kept]
        assert not any(start <= t.date <= end for t in dropped)

    def test_month_bounds(self):
        """Test first and last day including leap years."""
        assert month_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
        assert month_bounds("2023-02") == (date(2023, 2, 1), date(2023, 2, 28))
        assert month_bounds("2024-12") == (date(2024, 12, 1), date(2024, 12, 31))

    def test_month_bounds_rejects_bad_key(self):
        """Test malformed month keys raise."""
        with pytest.raises(ValueError):
            month_bounds("2024-13")

    def test_month_key_and_label(self):
        """Test month key and chart label formats."""
        assert month_key(date(2024, 3, 9)) == "2024-03"
        assert month_label("2024-01") == "Jan 2024"


class TestSummaries:
    """Tests for totals."""

    def test_summarize(self, january):
        """Test income, expenses and net."""
        summary = summarize(january)
        assert summary.income == 5_000_000
        assert summary.expenses == 475_000
        assert summary.net == 4_525_000

    def test_net_is_income_minus_expenses(self, make_transaction):
        """Test the net identity on awkward floats."""
        txns = [
            make_transaction(amount=0.1, type=INCOME),
            make_transaction(amount=0.2, type=INCOME),
            make_transaction(amount=0.3, type=EXPENSE),
        ]
        summary = summarize(txns)
        assert summary.net == summary.income - summary.expenses

    def test_summarize_empty(self):
        """Test an empty list sums to zero."""
        summary = summarize([])
        assert (summary.income, summary.expenses, summary.net) == (0, 0, 0)

    def test_spend_by_category_ignores_income(self, january):
        """Test only expenses count and zero categories are absent."""
        assert spend_by_category(january) == {"Makanan": 175_000, "Transportasi": 300_000}

    def test_monthly_overview_excludes_other_months(self, january, make_transaction):
        """Test only the month's transactions are summarized."""
        txns = january + [make_transaction(date(2024, 2, 1), 999, EXPENSE)]
        overview = monthly_overview(txns, "2024-01")
        assert overview.start == date(2024, 1, 1)
        assert overview.end == date(2024, 1, 31)
        assert len(overview.transactions) == 4
        assert overview.summary.expenses == 475_000


class TestMonthlyTotals:
    """Tests for the month-by-month chart data."""

    def test_gap_months_are_zero(self, make_transaction):
        """Test months without transactions appear with zeros."""
        txns = [
            make_transaction(date(2024, 3, 5), 100, EXPENSE),
            make_transaction(date(2024, 1, 5), 1000, INCOME),
        ]
        rows = monthly_totals(txns)
        assert [r.label for r in rows] == ["Jan 2024", "Feb 2024", "Mar 2024"]
        assert rows[0].income == 1000
        assert rows[1].income == rows[1].expenses == rows[1].net == 0
        assert rows[2].net == -100

    def test_crosses_year_boundary(self, make_transaction):
        """Test December rolls over to January."""
        txns = [
            make_transaction(date(2023, 12, 31)),
            make_transaction(date(2024, 1, 1)),
        ]
        assert [r.month for r in monthly_totals(txns)] == ["2023-12", "2024-01"]

    def test_empty(self):
        """Test no transactions gives no rows."""
        assert monthly_totals([]) == []


class TestListFilters:
    """Tests for search, sort and counts."""

    def test_search_term_matches_description_or_category(self, january):
        """Test the term is a case-insensitive substring match."""
        assert [t.description for t in search_transactions(january, "coff")] == ["Coffee"]
        assert len(search_transactions(january, "MAKANAN")) == 2

    def test_search_type_and_category_filters(self, january):
        """Test exact type and category filters and the 'all' wildcard."""
        assert len(search_transactions(january, type_filter="income")) == 1
        assert len(search_transactions(january, type_filter=EXPENSE, category_filter="Makanan")) == 2
        assert len(search_transactions(january, type_filter="all", category_filter="all")) == 4

    def test_distinct_categories(self, january):
        """Test categories in order of first appearance."""
        assert distinct_categories(january) == ["Gaji", "Makanan", "Transportasi"]

    def test_sort_newest_first_is_stable(self, make_transaction):
        """Test same-day transactions keep their order."""
        txns = [
            make_transaction(date(2024, 1, 1), description="old"),
            make_transaction(date(2024, 1, 2), description="a"),
            make_transaction(date(2024, 1, 2), description="b"),
        ]
        assert [t.description for t in sort_newest_first(txns)] == ["a", "b", "old"]

    def test_count_by_type(self, january):
        """Test counts per direction."""
        assert count_by_type(january) == {"income": 1, "expense": 3}
