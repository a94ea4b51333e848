"""Audit logging package."""

from aetherius.audit.logger import (
    AuditLogger,
    bind_correlation_id,
    configure_logging,
    create_correlation_id,
)

__all__ = [
    "AuditLogger",
    "bind_correlation_id",
    "configure_logging",
    "create_correlation_id",
]
