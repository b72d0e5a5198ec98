"""
Audit Models for Cashflow

Every significant action in the tracker is logged for audit purposes.
This provides:
1. Traceability of every mutation of the user's data
2. Debugging information when storage silently fails
3. A record of destructive actions (user reset, clear all, restore)

DESIGN DECISION: Audit events go to the local structured log only.
They are not written to the key-value store, so the persisted layout stays
exactly the five documented keys.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_EDITED = "transaction_edited"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTIONS_IMPORTED = "transactions_imported"
    FORM_SUBMISSION_IGNORED = "form_submission_ignored"

    # Budgets and goals
    BUDGET_SET = "budget_set"
    GOAL_ADDED = "goal_added"
    GOAL_PROGRESS_UPDATED = "goal_progress_updated"
    GOAL_DELETED = "goal_deleted"

    # User slot
    USER_CREATED = "user_created"
    USER_DELETED = "user_deleted"
    USER_LOGGED_OUT = "user_logged_out"
    USER_DATA_PURGED = "user_data_purged"

    # Import / export
    IMPORT_PREVIEWED = "import_previewed"
    IMPORT_BLOCKED = "import_blocked"
    REPORT_EXPORTED = "report_exported"
    BACKUP_EXPORTED = "backup_exported"
    BACKUP_RESTORED = "backup_restored"
    RESTORE_FAILED = "restore_failed"
    DATA_CLEARED = "data_cleared"

    # System events
    STORAGE_FAILURE = "storage_failure"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Which record this is about
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'budget', 'goal', 'user')"
    )
    entity_id: Optional[str] = None

    # Scope the action ran under (None when no user is set)
    user_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(tx, user_id)
        event = AuditEventBuilder.storage_failure(key, "quota_exceeded", msg)
    """

    @staticmethod
    def transaction_changed(
        event_type: AuditEventType,
        transaction_id: str,
        user_id: Optional[str],
        details: Optional[dict] = None,
    ) -> AuditEvent:
        verb = event_type.value.split("_", 1)[1]
        return AuditEvent(
            event_type=event_type,
            entity_type="transaction",
            entity_id=transaction_id,
            user_id=user_id,
            description=f"Transaction {verb}: {transaction_id}",
            details=details or {},
        )

    @staticmethod
    def transactions_imported(count: int, user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_IMPORTED,
            entity_type="transaction",
            user_id=user_id,
            description=f"Imported {count} transactions",
            details={"count": count},
        )

    @staticmethod
    def form_submission_ignored(
        missing: list[str],
        user_id: Optional[str],
        entity_type: str = "transaction",
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FORM_SUBMISSION_IGNORED,
            severity=AuditSeverity.DEBUG,
            entity_type=entity_type,
            user_id=user_id,
            description=f"{entity_type.capitalize()} form submitted with missing fields",
            details={"missing": missing},
        )

    @staticmethod
    def budget_set(category: str, month: str, limit: float, user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            entity_type="budget",
            entity_id=f"{category}@{month}",
            user_id=user_id,
            description=f"Budget for {category} in {month} set to {limit:g}",
            details={"category": category, "month": month, "monthly_limit": limit},
        )

    @staticmethod
    def goal_changed(
        event_type: AuditEventType,
        goal_id: str,
        user_id: Optional[str],
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            entity_type="goal",
            entity_id=goal_id,
            user_id=user_id,
            description=f"Goal {event_type.value.replace('_', ' ')}: {goal_id}",
            details=details or {},
        )

    @staticmethod
    def user_changed(
        event_type: AuditEventType,
        user_id: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        severity = (
            AuditSeverity.WARNING
            if event_type in (AuditEventType.USER_DELETED, AuditEventType.USER_DATA_PURGED)
            else AuditSeverity.INFO
        )
        return AuditEvent(
            event_type=event_type,
            severity=severity,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description=f"{event_type.value.replace('_', ' ').capitalize()}: {user_id}",
            details=details or {},
        )

    @staticmethod
    def import_previewed(valid: int, errors: int, user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_PREVIEWED,
            severity=AuditSeverity.WARNING if errors else AuditSeverity.INFO,
            user_id=user_id,
            description=f"Import preview: {valid} valid rows, {errors} errors",
            details={"valid_rows": valid, "error_count": errors},
        )

    @staticmethod
    def import_blocked(errors: list[str], user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_BLOCKED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            description=f"Import blocked by {len(errors)} errors",
            details={"errors": errors},
        )

    @staticmethod
    def exported(event_type: AuditEventType, user_id: Optional[str], details: dict) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            user_id=user_id,
            description=event_type.value.replace("_", " ").capitalize(),
            details=details,
        )

    @staticmethod
    def restore_failed(error_message: str, user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RESTORE_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            description="Backup restore failed",
            error_message=error_message,
        )

    @staticmethod
    def data_cleared(keys: list[str], user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_CLEARED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            description=f"Cleared {len(keys)} storage keys",
            details={"keys": keys},
        )

    @staticmethod
    def storage_failure(key: str, error_kind: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_FAILURE,
            severity=AuditSeverity.ERROR,
            entity_type="storage_key",
            entity_id=key,
            description=f"Storage failure on {key}: {error_kind}",
            error_message=error_message,
            details={"error_kind": error_kind},
        )
