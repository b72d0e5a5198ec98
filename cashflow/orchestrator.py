"""
Main Orchestrator for Cashflow

This module ties the components together behind one facade a UI can
drive:
1. Session (create user → scoped repositories → logout/delete)
2. Mutations (transaction form, budgets, goals)
3. Views (monthly overview, budget report, goal report, monthly totals)
4. Transfer (CSV preview → confirm → commit, CSV report, JSON backup/restore)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No import is stored without an explicit commit of an error-free preview
- No restore writes anything unless the whole backup validates
- Every mutation is audited

Repositories are rebuilt whenever the session changes, so they can never
write under a previous user's key.
"""

from datetime import date
from typing import Optional, Union

import structlog

from cashflow.audit import AuditLogger, configure_logging
from cashflow.config import Settings, get_settings
from cashflow.engines.aggregation import (
    filter_by_interval,
    month_bounds,
    month_key,
    monthly_overview,
    monthly_totals,
    spend_by_category,
)
from cashflow.engines.budgets import budget_overview, budget_status
from cashflow.engines.goals import goal_overview
from cashflow.models.audit import AuditEventBuilder, AuditEventType
from cashflow.models.finance import (
    Budget,
    BudgetForm,
    FinancialGoal,
    GoalDraft,
    GoalForm,
    Transaction,
    TransactionForm,
    User,
)
from cashflow.models.reports import BudgetOverview, GoalOverview, MonthlyOverview, MonthlyTotals
from cashflow.models.session import Session
from cashflow.models.transfer import ImportPreview
from cashflow.services.storage import (
    APP_VERSION_KEY,
    BudgetRepository,
    GoalRepository,
    KeyValueBackend,
    KeyValueStore,
    TransactionRepository,
    create_backend,
    default_goals,
)
from cashflow.session import UserScopeResolver
from cashflow.transfer import (
    BackupFormatError,
    build_snapshot,
    dump_snapshot,
    ensure_committable,
    export_transactions_csv,
    load_snapshot,
    parse_transactions_csv,
)


class CashflowApp:
    """
    Application facade.

    Flow for an import:
    1. preview_import(text) → ImportPreview (nothing stored)
    2. UI shows valid rows and errors
    3. commit_import(preview) → rows appended, or ImportBlockedError

    All views are recomputed from storage on every call.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[Settings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings()
        self._app_settings = self._settings.app
        self._audit_logger = audit_logger or AuditLogger()
        self._logger = structlog.get_logger("cashflow.app")
        self.store = store
        self.users = UserScopeResolver(store, self._audit_logger)
        self._bind_session()

    def _bind_session(self) -> None:
        """Rebuild every repository against the current session."""
        self.session: Session = self.users.session()
        seed = default_goals if self._app_settings.seed_default_goals else None
        self.transactions = TransactionRepository(self.store, self.session)
        self.budgets = BudgetRepository(self.store, self.session)
        self.goals = GoalRepository(self.store, self.session, seed=seed)

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def user_id(self) -> Optional[str]:
        return self.session.user_id

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    @property
    def current_user(self) -> Optional[User]:
        return self.users.current_user

    def create_user(self, name: str) -> User:
        user = self.users.create_user(name)
        self._bind_session()
        return user

    def delete_user(self, user_id: str) -> bool:
        deleted = self.users.delete_user(user_id)
        if deleted:
            self._bind_session()
        return deleted

    def logout(self) -> Optional[User]:
        previous = self.users.logout()
        self._bind_session()
        return previous

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def submit_transaction(
        self,
        form: TransactionForm,
        editing_id: Optional[str] = None,
    ) -> Optional[Transaction]:
        """
        Save the transaction form.

        An incomplete form (blank description or category, amount not
        above zero) is ignored and None is returned. With `editing_id`
        the matching transaction is replaced; an unknown id also gives
        None.
        """
        missing = form.missing_fields()
        if missing:
            self._audit_logger.log(
                AuditEventBuilder.form_submission_ignored(missing, self.user_id)
            )
            return None

        draft = form.to_draft()
        if editing_id is None:
            transaction = self.transactions.add(draft)
            event_type = AuditEventType.TRANSACTION_ADDED
        else:
            transaction = self.transactions.edit(editing_id, draft)
            if transaction is None:
                self._logger.debug("edit_unknown_transaction", transaction_id=editing_id)
                return None
            event_type = AuditEventType.TRANSACTION_EDITED

        self._audit_logger.log_transaction(
            event_type,
            transaction.id,
            self.user_id,
            details={"amount": transaction.amount, "type": transaction.type.value},
        )
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        deleted = self.transactions.delete(transaction_id)
        if deleted:
            self._audit_logger.log_transaction(
                AuditEventType.TRANSACTION_DELETED, transaction_id, self.user_id
            )
        return deleted

    # -------------------------------------------------------------------------
    # Budgets and goals
    # -------------------------------------------------------------------------

    def set_budget(
        self,
        category: str,
        monthly_limit: float,
        month: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Optional[Budget]:
        """
        Upsert the budget for (category, month); month defaults to this one.

        A blank category or a limit not above zero is ignored and None is
        returned. `spent` records the category's spending in the budgeted
        month at the time the budget is set. It is informational only.
        """
        form = BudgetForm(category=category, monthly_limit=monthly_limit)
        missing = form.missing_fields()
        if missing:
            self._audit_logger.log(
                AuditEventBuilder.form_submission_ignored(missing, self.user_id, "budget")
            )
            return None

        month = month or month_key(today or date.today())

        start, end = month_bounds(month)
        month_spend = spend_by_category(
            filter_by_interval(self.transactions.list(), start, end)
        ).get(form.category, 0.0)

        budget = self.budgets.set_budget(form.category, form.monthly_limit, month, spent=month_spend)
        self._audit_logger.log(
            AuditEventBuilder.budget_set(form.category, month, form.monthly_limit, self.user_id)
        )
        return budget

    def add_goal(self, goal: Union[GoalDraft, GoalForm]) -> Optional[FinancialGoal]:
        """
        Store a new savings goal.

        A GoalForm with a blank title or category, or a target not above
        zero, is ignored and None is returned.
        """
        if isinstance(goal, GoalForm):
            missing = goal.missing_fields()
            if missing:
                self._audit_logger.log(
                    AuditEventBuilder.form_submission_ignored(missing, self.user_id, "goal")
                )
                return None
            goal = goal.to_draft()

        stored = self.goals.add(goal)
        self._audit_logger.log_goal(
            AuditEventType.GOAL_ADDED,
            stored.id,
            self.user_id,
            details={"title": stored.title, "target_amount": stored.target_amount},
        )
        return stored

    def update_goal_progress(self, goal_id: str, current_amount: float) -> Optional[FinancialGoal]:
        goal = self.goals.update_progress(goal_id, current_amount)
        if goal is not None:
            self._audit_logger.log_goal(
                AuditEventType.GOAL_PROGRESS_UPDATED,
                goal_id,
                self.user_id,
                details={"current_amount": current_amount},
            )
        return goal

    def delete_goal(self, goal_id: str) -> bool:
        deleted = self.goals.delete(goal_id)
        if deleted:
            self._audit_logger.log_goal(AuditEventType.GOAL_DELETED, goal_id, self.user_id)
        return deleted

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def monthly_overview(self, month: Optional[str] = None) -> MonthlyOverview:
        return monthly_overview(self.transactions.list(), month or month_key(date.today()))

    def budget_report(self, month: Optional[str] = None) -> BudgetOverview:
        month = month or month_key(date.today())
        rows = budget_status(
            self.transactions.list(),
            self.budgets.list(),
            month,
            warning_percent=self._app_settings.budget_warning_percent,
        )
        return budget_overview(rows, month)

    def goal_report(self, today: Optional[date] = None) -> GoalOverview:
        return goal_overview(
            self.goals.list(),
            today=today,
            near_deadline_days=self._app_settings.goal_near_deadline_days,
        )

    def monthly_totals(self) -> list[MonthlyTotals]:
        return monthly_totals(self.transactions.list())

    # -------------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------------

    def preview_import(self, text: str) -> ImportPreview:
        """Parse a CSV file. Nothing is stored."""
        preview = parse_transactions_csv(text)
        self._audit_logger.log(AuditEventBuilder.import_previewed(
            len(preview.transactions), len(preview.issues), self.user_id
        ))
        return preview

    def commit_import(self, preview: ImportPreview) -> int:
        """
        Append the previewed rows.

        Raises:
            ImportBlockedError: If the preview has any error
        """
        if preview.has_errors:
            self._audit_logger.log(
                AuditEventBuilder.import_blocked(preview.errors, self.user_id)
            )
        ensure_committable(preview)

        count = self.transactions.import_many(preview.transactions)
        if count:
            self._audit_logger.log(
                AuditEventBuilder.transactions_imported(count, self.user_id)
            )
        return count

    def export_report_csv(self, month: Optional[str] = None) -> str:
        """The month's transactions as CSV."""
        overview = self.monthly_overview(month)
        text = export_transactions_csv(overview.transactions)
        self._audit_logger.log(AuditEventBuilder.exported(
            AuditEventType.REPORT_EXPORTED,
            self.user_id,
            {"month": overview.month, "rows": len(overview.transactions)},
        ))
        return text

    def _stored_app_version(self) -> str:
        value = self.store.get(APP_VERSION_KEY, None).value
        return value if isinstance(value, str) and value else self._app_settings.app_version

    def export_backup(self) -> str:
        """All three collections of the current scope as JSON."""
        snapshot = build_snapshot(
            self.transactions.list(),
            self.budgets.list(),
            self.goals.list(),
            app_version=self._stored_app_version(),
        )
        self._audit_logger.log(AuditEventBuilder.exported(
            AuditEventType.BACKUP_EXPORTED,
            self.user_id,
            {
                "transactions": len(snapshot.transactions or []),
                "budgets": len(snapshot.budgets or []),
                "financial_goals": len(snapshot.financial_goals or []),
            },
        ))
        return dump_snapshot(snapshot)

    def restore_backup(self, text: str) -> list[str]:
        """
        Overwrite stored collections with those present in the backup.

        Collections missing from the file are left as they are.

        Returns:
            The storage keys that were written

        Raises:
            BackupFormatError: If the file is malformed; nothing is written
        """
        try:
            snapshot = load_snapshot(text)
        except BackupFormatError as e:
            self._audit_logger.log(AuditEventBuilder.restore_failed(str(e), self.user_id))
            raise

        written = []
        if snapshot.transactions is not None:
            self.transactions.replace_all(snapshot.transactions)
            written.append(self.transactions.key)
        if snapshot.budgets is not None:
            self.budgets.replace_all(snapshot.budgets)
            written.append(self.budgets.key)
        if snapshot.financial_goals is not None:
            self.goals.replace_all(snapshot.financial_goals)
            written.append(self.goals.key)

        self._audit_logger.log(AuditEventBuilder.exported(
            AuditEventType.BACKUP_RESTORED,
            self.user_id,
            {"keys": written, "app_version": snapshot.app_version},
        ))
        return written

    def clear_all_data(self) -> list[str]:
        """Remove the current scope's collections and the app version key."""
        keys = [repo.key for repo in (self.transactions, self.budgets, self.goals)]
        keys.append(APP_VERSION_KEY)
        for key in keys:
            self.store.remove(key)
        self._audit_logger.log(AuditEventBuilder.data_cleared(keys, self.user_id))
        return keys


def create_app(
    settings: Optional[Settings] = None,
    backend: Optional[KeyValueBackend] = None,
    audit_logger: Optional[AuditLogger] = None,
    configure_logs: bool = True,
) -> CashflowApp:
    """
    Factory function to create the application.

    Args:
        settings: Settings to use. Defaults to get_settings().
        backend: Storage medium. Defaults to the one named in settings.
        audit_logger: Shared audit logger. A local one is created if None.
        configure_logs: Configure structlog from settings first.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    if configure_logs:
        configure_logging(app_settings.log_level, app_settings.log_json)

    audit_logger = audit_logger or AuditLogger()
    if backend is None:
        backend = create_backend(storage_settings=settings.storage)

    store = KeyValueStore(backend, audit_logger=audit_logger)
    return CashflowApp(store, settings=settings, audit_logger=audit_logger)
