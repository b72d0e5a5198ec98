"""Audit logging package."""

from cashflow.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
