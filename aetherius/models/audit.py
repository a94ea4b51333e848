"""
Audit Models for Aetherius

Every state change and every external call is logged as an audit event.
This provides:
1. Traceability of money movements and the alerts they raise
2. Debugging information when the store or the AI provider fails
3. A request-level trail through the correlation id

DESIGN DECISION: Audit events are emitted as structured log lines only.
They are not persisted in the entity store.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from aetherius.models.common import utcnow


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Money movements
    TRANSACTION_RECORDED = "transaction_recorded"
    BUDGET_SPEND_RECORDED = "budget_spend_recorded"

    # Alerts
    ALERT_RAISED = "alert_raised"
    ALERT_READ = "alert_read"

    # AI generation
    GENERATION_COMPLETED = "generation_completed"
    CONTENT_GENERATED = "content_generated"
    GENERATION_FAILED = "generation_failed"

    # Lifecycle
    STORE_CONNECTED = "store_connected"
    DEMO_DATA_SEEDED = "demo_data_seeded"

    # System events
    STORAGE_ERROR = "storage_error"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'alert', 'budget')"
    )
    entity_id: Optional[str] = None
    family_id: Optional[str] = None

    # Correlation - the request that caused the event
    correlation_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        log_dict = {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "family_id": self.family_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }
        # Leave it out when unset so the request-bound value from contextvars stays
        if self.correlation_id is not None:
            log_dict["correlation_id"] = self.correlation_id
        return log_dict


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.alert_read(alert_id, family_id)
        event = AuditEventBuilder.storage_error(str(error), correlation_id)
    """

    @staticmethod
    def transaction_recorded(
        transaction_id: str,
        family_id: str,
        category: str,
        amount: str,
        transaction_type: str,
        correlation_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_RECORDED,
            entity_type="transaction",
            entity_id=transaction_id,
            family_id=family_id,
            correlation_id=correlation_id,
            description=f"Transaction recorded: {transaction_type} ₹{amount} in {category}",
            details={
                "category": category,
                "amount": amount,
                "type": transaction_type,
            },
        )

    @staticmethod
    def budget_spend_recorded(
        budget_id: str,
        family_id: str,
        category: str,
        amount: str,
        correlation_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SPEND_RECORDED,
            entity_type="budget",
            entity_id=budget_id,
            family_id=family_id,
            correlation_id=correlation_id,
            description=f"Budget spend recorded: ₹{amount} in {category}",
            details={
                "category": category,
                "amount": amount,
            },
        )

    @staticmethod
    def alert_raised(
        alert_id: str,
        family_id: str,
        alert_type: str,
        severity: str,
        title: str,
        correlation_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERT_RAISED,
            severity=AuditSeverity.WARNING,
            entity_type="alert",
            entity_id=alert_id,
            family_id=family_id,
            correlation_id=correlation_id,
            description=f"Alert raised: {title}",
            details={
                "alert_type": alert_type,
                "alert_severity": severity,
            },
        )

    @staticmethod
    def alert_read(
        alert_id: str,
        family_id: str,
        correlation_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERT_READ,
            entity_type="alert",
            entity_id=alert_id,
            family_id=family_id,
            correlation_id=correlation_id,
            description="Alert marked as read",
        )

    @staticmethod
    def generation_completed(
        operation: str,
        model_name: str,
        correlation_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GENERATION_COMPLETED,
            correlation_id=correlation_id,
            description=f"AI {operation} completed",
            details={
                "operation": operation,
                "model": model_name,
            },
        )

    @staticmethod
    def content_generated(
        content_id: str,
        topic: str,
        correlation_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONTENT_GENERATED,
            entity_type="educational_content",
            entity_id=content_id,
            correlation_id=correlation_id,
            description=f"Generated lesson stored: {topic}",
            details={
                "topic": topic,
            },
        )

    @staticmethod
    def generation_failed(
        operation: str,
        error_message: str,
        correlation_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GENERATION_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"AI {operation} failed",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def store_connected(backend: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_CONNECTED,
            description=f"Entity store connected: {backend}",
            details={"backend": backend},
        )

    @staticmethod
    def demo_data_seeded(family_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEMO_DATA_SEEDED,
            entity_type="family",
            entity_id=family_id,
            family_id=family_id,
            description="Demo family loaded into empty store",
        )

    @staticmethod
    def storage_error(
        error_message: str,
        correlation_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description="Entity store operation failed",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
