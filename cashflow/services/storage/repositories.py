"""
Scoped Repositories

One repository per stored collection. Each is built against a Session and
resolves its own storage key from it, so no call site ever concatenates
"<base>_<user id>" by hand.

Every repository reads the whole list, changes it, and writes the whole
list back. Collections are small (one person's finances), so there is no
partial update path.

DESIGN DECISION: Records that fail validation on read are skipped and
logged rather than failing the whole list. A single corrupt row must not
hide the rest of the user's data.
"""

from datetime import date
from typing import Callable, Generic, Iterable, Optional, TypeVar

import structlog
from pydantic import ValidationError

from cashflow.models.finance import (
    Budget,
    FinancialGoal,
    GoalDraft,
    StoredModel,
    Transaction,
    TransactionDraft,
)
from cashflow.models.session import Session
from cashflow.services.storage.adapter import KeyValueStore
from cashflow.services.storage.interface import StorageResult
from cashflow.services.storage.keys import (
    BUDGETS_KEY,
    FINANCIAL_GOALS_KEY,
    TRANSACTIONS_KEY,
)


M = TypeVar("M", bound=StoredModel)


class ScopedCollectionRepository(Generic[M]):
    """
    A list of records stored as one JSON array under a scoped key.

    `last_result` holds the StorageResult of the most recent read or
    write, so callers can tell when a change only reached memory.
    """

    base_key: str = ""
    model: type[StoredModel] = StoredModel

    def __init__(self, store: KeyValueStore, session: Session):
        self._store = store
        self._session = session
        self._logger = structlog.get_logger("cashflow.repository")
        self.last_result: Optional[StorageResult] = None

    @property
    def key(self) -> str:
        return self._session.scoped_key(self.base_key)

    @property
    def session(self) -> Session:
        return self._session

    def _default(self) -> list[dict]:
        return []

    def _parse(self, raw: object) -> list[M]:
        if not isinstance(raw, list):
            self._logger.warning(
                "collection_not_a_list",
                key=self.key,
                found=type(raw).__name__,
            )
            return []

        records = []
        for index, item in enumerate(raw):
            try:
                records.append(self.model.model_validate(item))
            except ValidationError as e:
                self._logger.warning(
                    "record_skipped",
                    key=self.key,
                    index=index,
                    error=str(e),
                )
        return records

    def list(self) -> list[M]:
        """All records in stored order."""
        result = self._store.get(self.key, self._default())
        self.last_result = result
        return self._parse(result.value)

    def replace_all(self, records: Iterable[M]) -> StorageResult:
        """Overwrite the whole collection."""
        payload = [record.to_storage() for record in records]
        result = self._store.set(self.key, payload)
        self.last_result = result
        return result

    def clear(self) -> StorageResult:
        """Remove the collection key entirely."""
        result = self._store.remove(self.key)
        self.last_result = result
        return result


class TransactionRepository(ScopedCollectionRepository[Transaction]):
    """
    Ordered transactions for the session's user.

    Duplicates (same date and description) are allowed; only ids are
    unique.
    """

    base_key = TRANSACTIONS_KEY
    model = Transaction

    def get(self, transaction_id: str) -> Optional[Transaction]:
        return next((t for t in self.list() if t.id == transaction_id), None)

    def add(self, draft: TransactionDraft) -> Transaction:
        """Store a new transaction with a fresh id at the end of the list."""
        transactions = self.list()
        existing_ids = {t.id for t in transactions}

        transaction = Transaction.from_draft(draft)
        while transaction.id in existing_ids:
            transaction = Transaction.from_draft(draft)

        transactions.append(transaction)
        self.replace_all(transactions)
        return transaction

    def edit(self, transaction_id: str, draft: TransactionDraft) -> Optional[Transaction]:
        """
        Replace every field of a transaction except its id.

        Returns None (and writes nothing) if the id is unknown.
        """
        transactions = self.list()
        for index, current in enumerate(transactions):
            if current.id == transaction_id:
                updated = Transaction.from_draft(draft, record_id=transaction_id)
                transactions[index] = updated
                self.replace_all(transactions)
                return updated
        return None

    def delete(self, transaction_id: str) -> bool:
        """Remove a transaction. Returns False if the id is unknown."""
        transactions = self.list()
        remaining = [t for t in transactions if t.id != transaction_id]
        if len(remaining) == len(transactions):
            return False
        self.replace_all(remaining)
        return True

    def import_many(self, records: Iterable[Transaction]) -> int:
        """
        Append already-validated transactions in order.

        No de-duplication against what is already stored.
        """
        incoming = list(records)
        if not incoming:
            return 0
        transactions = self.list()
        transactions.extend(incoming)
        self.replace_all(transactions)
        return len(incoming)


class BudgetRepository(ScopedCollectionRepository[Budget]):
    """
    Monthly category budgets, at most one per (category, month).
    """

    base_key = BUDGETS_KEY
    model = Budget

    def for_month(self, month: str) -> list[Budget]:
        return [b for b in self.list() if b.month == month]

    def get(self, category: str, month: str) -> Optional[Budget]:
        return next(
            (b for b in self.list() if b.category == category and b.month == month),
            None,
        )

    def set_budget(
        self,
        category: str,
        monthly_limit: float,
        month: str,
        spent: float = 0.0,
    ) -> Budget:
        """
        Upsert the budget for (category, month).

        Any existing budget for the pair is dropped and the new one is
        appended at the end.
        """
        budget = Budget(
            category=category,
            monthly_limit=monthly_limit,
            spent=spent,
            month=month,
        )
        budgets = [
            b for b in self.list()
            if not (b.category == budget.category and b.month == budget.month)
        ]
        budgets.append(budget)
        self.replace_all(budgets)
        return budget


def default_goals() -> list[FinancialGoal]:
    """The two example goals shown on a fresh install."""
    return [
        FinancialGoal(
            id="1",
            title="Emergency Fund",
            target_amount=50_000_000,
            current_amount=15_000_000,
            deadline=date(2024, 12, 31),
            category="Emergency Fund",
            description="6 months of expenses",
        ),
        FinancialGoal(
            id="2",
            title="Vacation to Japan",
            target_amount=25_000_000,
            current_amount=8_000_000,
            deadline=date(2024, 6, 15),
            category="Vacation",
            description="Family trip to Japan",
        ),
    ]


class GoalRepository(ScopedCollectionRepository[FinancialGoal]):
    """
    Savings goals.

    When the key has never been written, the example goals are returned.
    They are persisted along with the first real change.
    """

    base_key = FINANCIAL_GOALS_KEY
    model = FinancialGoal

    def __init__(
        self,
        store: KeyValueStore,
        session: Session,
        seed: Optional[Callable[[], list[FinancialGoal]]] = default_goals,
    ):
        super().__init__(store, session)
        self._seed = seed

    def _default(self) -> list[dict]:
        if self._seed is None:
            return []
        return [goal.to_storage() for goal in self._seed()]

    def get(self, goal_id: str) -> Optional[FinancialGoal]:
        return next((g for g in self.list() if g.id == goal_id), None)

    def add(self, draft: GoalDraft) -> FinancialGoal:
        goals = self.list()
        existing_ids = {g.id for g in goals}

        goal = FinancialGoal(**draft.model_dump())
        while goal.id in existing_ids:
            goal = FinancialGoal(**draft.model_dump())

        goals.append(goal)
        self.replace_all(goals)
        return goal

    def update_progress(self, goal_id: str, current_amount: float) -> Optional[FinancialGoal]:
        """
        Set how much has been saved towards a goal.

        Amounts above the target are kept as-is.
        """
        goals = self.list()
        for index, goal in enumerate(goals):
            if goal.id == goal_id:
                updated = goal.model_copy(update={"current_amount": current_amount})
                updated = FinancialGoal.model_validate(updated.model_dump())
                goals[index] = updated
                self.replace_all(goals)
                return updated
        return None

    def delete(self, goal_id: str) -> bool:
        goals = self.list()
        remaining = [g for g in goals if g.id != goal_id]
        if len(remaining) == len(goals):
            return False
        self.replace_all(remaining)
        return True
