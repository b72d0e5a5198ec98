"""Tests for the scoped transaction, budget and goal repositories."""

import pytest
from datetime import date
from pydantic import ValidationError

from cashflow.models.finance import GoalDraft, Transaction, TransactionDraft, User
from cashflow.models.session import Session
from cashflow.services.storage import (
    BudgetRepository,
    GoalRepository,
    StorageErrorKind,
    TransactionRepository,
)


ALICE = Session(user=User(id="u_alice", name="Alice"))
BOB = Session(user=User(id="u_bob", name="Bob"))


def draft(description="Coffee", amount=25000.0, day=date(2024, 1, 15), type="expense", category="Makanan"):
    return TransactionDraft(
        date=day,
        description=description,
        amount=amount,
        type=type,
        category=category,
    )


class TestTransactionRepository:
    """Tests for transaction storage."""

    def test_key_follows_session(self, store):
        """Test the storage key is scoped by the session."""
        assert TransactionRepository(store, Session()).key == "cashflow_transactions"
        assert TransactionRepository(store, ALICE).key == "cashflow_transactions_u_alice"

    def test_add_appends_with_fresh_id(self, store):
        """Test add assigns distinct ids and keeps insertion order."""
        repo = TransactionRepository(store, ALICE)
        first = repo.add(draft("One"))
        second = repo.add(draft("Two"))

        assert first.id != second.id
        assert [t.description for t in repo.list()] == ["One", "Two"]
        assert repo.get(second.id) == second

    def test_stored_as_camel_case_json(self, store, backend):
        """Test records are written under the scoped key."""
        repo = TransactionRepository(store, ALICE)
        repo.add(draft().model_copy(update={"is_recurring": True}))
        assert '"isRecurring": true' in backend.read("cashflow_transactions_u_alice")

    def test_edit_replaces_fields_and_keeps_id(self, store):
        """Test edit is a full replacement except the id."""
        repo = TransactionRepository(store, ALICE)
        original = repo.add(draft("Coffee", 25000))

        updated = repo.edit(original.id, draft("Lunch", 50000, type="expense", category="Makanan"))

        assert updated.id == original.id
        assert repo.list() == [updated]
        assert repo.get(original.id).description == "Lunch"

    def test_edit_unknown_id_is_noop(self, store):
        """Test editing an unknown id writes nothing."""
        repo = TransactionRepository(store, ALICE)
        repo.add(draft())
        before = repo.list()
        assert repo.edit("missing", draft("Other")) is None
        assert repo.list() == before

    def test_delete(self, store):
        """Test delete removes only the matching record."""
        repo = TransactionRepository(store, ALICE)
        keep = repo.add(draft("Keep"))
        gone = repo.add(draft("Gone"))

        assert repo.delete(gone.id) is True
        assert repo.delete(gone.id) is False
        assert repo.list() == [keep]

    def test_import_many_allows_duplicates(self, store):
        """Test imports append in order without de-duplication."""
        repo = TransactionRepository(store, ALICE)
        existing = repo.add(draft("Coffee"))
        batch = [Transaction.from_draft(draft("Coffee")), Transaction.from_draft(draft("Tea"))]

        assert repo.import_many(batch) == 2
        assert [t.description for t in repo.list()] == ["Coffee", "Coffee", "Tea"]
        assert repo.list()[0] == existing
        assert repo.import_many([]) == 0

    def test_users_do_not_see_each_other(self, store):
        """Test scoped keys never collide across users."""
        TransactionRepository(store, ALICE).add(draft("Alice's"))
        TransactionRepository(store, BOB).add(draft("Bob's"))

        assert [t.description for t in TransactionRepository(store, ALICE).list()] == ["Alice's"]
        assert [t.description for t in TransactionRepository(store, BOB).list()] == ["Bob's"]
        assert TransactionRepository(store, Session()).list() == []

    def test_invalid_records_are_skipped(self, store):
        """Test one corrupt record does not hide the rest."""
        valid = {
            "id": "t1",
            "date": "2024-01-15",
            "description": "Coffee",
            "amount": 25000,
            "type": "expense",
            "category": "Makanan",
        }
        store.set("cashflow_transactions", [valid, {"id": "t2", "amount": -5}])
        assert [t.id for t in TransactionRepository(store, Session()).list()] == ["t1"]

    def test_non_list_value_reads_empty(self, store):
        """Test a stored value of the wrong shape reads as empty."""
        store.set("cashflow_transactions", {"oops": 1})
        assert TransactionRepository(store, Session()).list() == []

    def test_last_result_reports_missing_key(self, store):
        """Test the last storage result is observable."""
        repo = TransactionRepository(store, ALICE)
        assert repo.list() == []
        assert repo.last_result.error_kind == StorageErrorKind.MISSING

    def test_clear(self, store, backend):
        """Test clear removes the key."""
        repo = TransactionRepository(store, ALICE)
        repo.add(draft())
        repo.clear()
        assert backend.read(repo.key) is None


class TestBudgetRepository:
    """Tests for budget upsert."""

    def test_setting_twice_keeps_one_record(self, store):
        """Test upsert leaves one budget per (category, month) with the latest limit."""
        repo = BudgetRepository(store, ALICE)
        repo.set_budget("Makanan", 100000, "2024-01")
        repo.set_budget("Makanan", 200000, "2024-01")

        budgets = repo.list()
        assert len(budgets) == 1
        assert budgets[0].monthly_limit == 200000

    def test_replacement_moves_to_end(self, store):
        """Test the replaced budget is appended after the others."""
        repo = BudgetRepository(store, ALICE)
        repo.set_budget("Makanan", 1, "2024-01")
        repo.set_budget("Hiburan", 2, "2024-01")
        repo.set_budget("Makanan", 3, "2024-01")
        assert [b.category for b in repo.list()] == ["Hiburan", "Makanan"]

    def test_months_are_independent(self, store):
        """Test the same category in another month is a separate budget."""
        repo = BudgetRepository(store, ALICE)
        repo.set_budget("Makanan", 100, "2024-01")
        repo.set_budget("Makanan", 200, "2024-02")

        assert len(repo.list()) == 2
        assert [b.monthly_limit for b in repo.for_month("2024-02")] == [200]
        assert repo.get("Makanan", "2024-01").monthly_limit == 100
        assert repo.get("Hiburan", "2024-01") is None

    def test_spent_snapshot_is_stored(self, store):
        """Test the advisory spent value is kept."""
        budget = BudgetRepository(store, ALICE).set_budget("Makanan", 100, "2024-01", spent=40)
        assert budget.spent == 40


class TestGoalRepository:
    """Tests for goal storage and seeds."""

    def test_seed_goals_returned_when_absent(self, store, backend):
        """Test a fresh install shows the two example goals without storing them."""
        repo = GoalRepository(store, ALICE)
        goals = repo.list()

        assert [g.id for g in goals] == ["1", "2"]
        assert goals[0].title == "Emergency Fund"
        assert goals[0].target_amount == 50_000_000
        assert goals[1].deadline == date(2024, 6, 15)
        assert backend.read(repo.key) is None

    def test_seeds_persist_with_first_change(self, store, backend):
        """Test adding a goal stores the seeds along with it."""
        repo = GoalRepository(store, ALICE)
        goal = repo.add(GoalDraft(
            title="New Car",
            target_amount=200_000_000,
            deadline=date(2026, 1, 1),
            category="Car",
        ))

        assert [g.id for g in repo.list()] == ["1", "2", goal.id]
        assert backend.read(repo.key) is not None

    def test_no_seeds(self, store):
        """Test seeding can be turned off."""
        assert GoalRepository(store, ALICE, seed=None).list() == []

    def test_update_progress_allows_over_saving(self, store):
        """Test progress can go past the target."""
        repo = GoalRepository(store, ALICE)
        updated = repo.update_progress("2", 30_000_000)

        assert updated.current_amount == 30_000_000
        assert repo.get("2").current_amount == 30_000_000
        assert repo.get("1").current_amount == 15_000_000

    def test_update_progress_unknown_goal(self, store):
        """Test updating an unknown goal returns None."""
        assert GoalRepository(store, ALICE).update_progress("nope", 1) is None

    def test_update_progress_rejects_negative(self, store):
        """Test a negative saved amount is invalid."""
        with pytest.raises(ValidationError):
            GoalRepository(store, ALICE).update_progress("1", -1)

    def test_delete(self, store):
        """Test deleting a goal."""
        repo = GoalRepository(store, ALICE)
        assert repo.delete("1") is True
        assert repo.delete("1") is False
        assert [g.id for g in repo.list()] == ["2"]

    def test_empty_list_does_not_reseed(self, store):
        """Test deleting every goal leaves an empty list, not the seeds."""
        repo = GoalRepository(store, ALICE)
        repo.delete("1")
        repo.delete("2")
        assert repo.list() == []
