"""
Audit Logger

DESIGN DECISION: Every significant action in the tracker is logged.
This provides:
1. Traceability of every change to the user's data
2. Visibility into storage failures that the UI deliberately swallows
3. A trail of destructive actions (user reset, clear all, restore)

The audit logger:
- Is synchronous, like the rest of the tracker
- Keeps the most recent events in memory for inspection
"""

import logging
import sys
from collections import deque
from typing import Optional

import structlog

from cashflow.models.audit import AuditEvent, AuditEventBuilder, AuditEventType


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs every event to the structured local log and keeps the last
    `history_size` events in memory.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("cashflow.audit")
        self._history: deque[AuditEvent] = deque(maxlen=history_size)

    def log(self, event: AuditEvent) -> AuditEvent:
        """Log an audit event and return it."""
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._history.append(event)
        return event

    def recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._history))[:limit]

    def events_of_type(self, event_type: AuditEventType) -> list[AuditEvent]:
        """All remembered events of one type, oldest first."""
        return [e for e in self._history if e.event_type == event_type]

    def log_transaction(
        self,
        event_type: AuditEventType,
        transaction_id: str,
        user_id: Optional[str],
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return self.log(AuditEventBuilder.transaction_changed(
            event_type=event_type,
            transaction_id=transaction_id,
            user_id=user_id,
            details=details,
        ))

    def log_goal(
        self,
        event_type: AuditEventType,
        goal_id: str,
        user_id: Optional[str],
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return self.log(AuditEventBuilder.goal_changed(
            event_type=event_type,
            goal_id=goal_id,
            user_id=user_id,
            details=details,
        ))

    def log_user(
        self,
        event_type: AuditEventType,
        user_id: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return self.log(AuditEventBuilder.user_changed(
            event_type=event_type,
            user_id=user_id,
            details=details,
        ))

    def log_storage_failure(
        self,
        key: str,
        error_kind: str,
        error_message: str,
    ) -> AuditEvent:
        """Log a swallowed storage failure."""
        return self.log(AuditEventBuilder.storage_failure(
            key=key,
            error_kind=error_kind,
            error_message=error_message,
        ))
