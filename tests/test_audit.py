"""Tests for the audit logger."""

from cashflow.audit import AuditLogger, configure_logging
from cashflow.models.audit import AuditEventBuilder, AuditEventType


class TestAuditLogger:
    """Tests for in-memory history and helpers."""

    def test_log_returns_event(self):
        """Test log hands back the event it recorded."""
        logger = AuditLogger()
        event = AuditEventBuilder.budget_set("Makanan", "2024-01", 200_000, "u1")
        assert logger.log(event) is event

    def test_recent_events_newest_first(self):
        """Test history order and limit."""
        logger = AuditLogger()
        logger.log_transaction(AuditEventType.TRANSACTION_ADDED, "t1", None)
        logger.log_transaction(AuditEventType.TRANSACTION_DELETED, "t1", None)

        recent = logger.recent_events()
        assert [e.event_type for e in recent] == [
            AuditEventType.TRANSACTION_DELETED,
            AuditEventType.TRANSACTION_ADDED,
        ]
        assert len(logger.recent_events(limit=1)) == 1

    def test_history_is_bounded(self):
        """Test old events fall out of the history."""
        logger = AuditLogger(history_size=2)
        for goal_id in ("a", "b", "c"):
            logger.log_goal(AuditEventType.GOAL_DELETED, goal_id, None)
        assert [e.entity_id for e in logger.recent_events()] == ["c", "b"]

    def test_events_of_type(self):
        """Test filtering by event type."""
        logger = AuditLogger()
        logger.log_user(AuditEventType.USER_CREATED, "u1")
        logger.log_storage_failure("k", "unavailable", "no medium")
        failures = logger.events_of_type(AuditEventType.STORAGE_FAILURE)
        assert [e.entity_id for e in failures] == ["k"]

    def test_logging_after_configuration(self):
        """Test events log through a configured console renderer."""
        configure_logging("DEBUG", json_output=False)
        logger = AuditLogger()
        event = logger.log(AuditEventBuilder.data_cleared(["cashflow_budgets"], None))
        assert event.details == {"keys": ["cashflow_budgets"]}
