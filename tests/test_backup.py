"""Tests for JSON backups."""

import json

import pytest
from datetime import date

from cashflow.models.finance import Budget, FinancialGoal
from cashflow.transfer import BackupFormatError, build_snapshot, dump_snapshot, load_snapshot


@pytest.fixture
def snapshot(make_transaction):
    return build_snapshot(
        transactions=[make_transaction()],
        budgets=[Budget(category="Makanan", monthly_limit=200_000, month="2024-01")],
        financial_goals=[FinancialGoal(
            title="Car",
            target_amount=100,
            current_amount=10,
            deadline=date(2025, 1, 1),
            category="Car",
        )],
    )


class TestDumpSnapshot:
    """Tests for writing backups."""

    def test_camel_case_document(self, snapshot):
        """Test the backup uses the stored field names."""
        data = json.loads(dump_snapshot(snapshot))
        assert set(data) == {"transactions", "budgets", "financialGoals", "exportDate", "appVersion"}
        assert data["appVersion"] == "0.2.0"
        assert data["budgets"][0]["monthlyLimit"] == 200_000
        assert data["financialGoals"][0]["targetAmount"] == 100
        assert "isRecurring" not in data["transactions"][0]

    def test_dump_is_indented(self, snapshot):
        """Test the file is human-readable."""
        assert "\n  " in dump_snapshot(snapshot)

    def test_app_version_override(self):
        """Test an explicit version is recorded."""
        assert build_snapshot([], [], [], app_version="0.1.0").app_version == "0.1.0"


class TestLoadSnapshot:
    """Tests for reading backups."""

    def test_round_trip(self, snapshot):
        """Test dump then load gives back the same collections."""
        loaded = load_snapshot(dump_snapshot(snapshot))
        assert loaded.transactions == snapshot.transactions
        assert loaded.budgets == snapshot.budgets
        assert loaded.financial_goals == snapshot.financial_goals

    def test_absent_collections_stay_none(self):
        """Test a partial backup only carries what it names."""
        loaded = load_snapshot('{"budgets": []}')
        assert loaded.budgets == []
        assert loaded.transactions is None
        assert loaded.financial_goals is None

    @pytest.mark.parametrize("text", [
        "{not json",
        "[]",
        '{"transactions": [{"id": "t1", "amount": -5}]}',
        '{"budgets": [{"category": "Makanan", "monthlyLimit": 1, "month": "January"}]}',
    ])
    def test_malformed_backups_raise(self, text):
        """Test bad JSON, wrong shape and invalid records are rejected."""
        with pytest.raises(BackupFormatError):
            load_snapshot(text)
