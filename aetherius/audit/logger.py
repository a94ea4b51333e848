"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of transactions, budget spend and alerts
2. Debugging capability when the store or the AI provider fails
3. Per-request correlation of related events

The audit logger:
- Is async so call sites read the same whether or not it ever persists
- Writes only to the local structured log
- Picks up the request's correlation id from structlog contextvars
"""

import logging
import sys
from decimal import Decimal
from typing import Optional
from uuid import uuid4

import structlog

from aetherius.models import (
    AuditEvent,
    AuditEventBuilder,
    Budget,
    BudgetCategory,
    EducationalContent,
    SmartAlert,
    Transaction,
)


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog and the stdlib root logger.

    Log lines are rendered as JSON with an ISO timestamp. Anything bound
    with bind_correlation_id() is merged into every line.
    """
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    logging.getLogger().setLevel(log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Writes every event as one structured log line.
    """

    def __init__(self, logger_name: str = "aetherius.audit"):
        self._logger = structlog.get_logger(logger_name)

    async def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    async def log_transaction_recorded(
        self,
        transaction: Transaction,
        correlation_id: Optional[str] = None,
    ) -> None:
        event = AuditEventBuilder.transaction_recorded(
            transaction_id=transaction.id,
            family_id=transaction.family_id,
            category=transaction.category,
            amount=str(transaction.amount),
            transaction_type=transaction.type.value,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_budget_spend_recorded(
        self,
        budget: Budget,
        category: BudgetCategory,
        amount: Decimal,
        correlation_id: Optional[str] = None,
    ) -> None:
        event = AuditEventBuilder.budget_spend_recorded(
            budget_id=budget.id,
            family_id=budget.family_id,
            category=category.value,
            amount=str(amount),
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_alert_raised(
        self,
        alert: SmartAlert,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Log a newly created alert."""
        event = AuditEventBuilder.alert_raised(
            alert_id=alert.id,
            family_id=alert.family_id,
            alert_type=alert.type.value,
            severity=alert.severity.value,
            title=alert.title,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_alert_read(
        self,
        alert: SmartAlert,
        correlation_id: Optional[str] = None,
    ) -> None:
        event = AuditEventBuilder.alert_read(
            alert_id=alert.id,
            family_id=alert.family_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_generation_completed(
        self,
        operation: str,
        model_name: str,
        correlation_id: Optional[str] = None,
    ) -> None:
        event = AuditEventBuilder.generation_completed(
            operation=operation,
            model_name=model_name,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_content_generated(
        self,
        content: EducationalContent,
        topic: str,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Log a generated lesson that was stored in the catalog."""
        event = AuditEventBuilder.content_generated(
            content_id=content.id,
            topic=topic,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_generation_failed(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[str] = None,
    ) -> None:
        event = AuditEventBuilder.generation_failed(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_store_connected(self, backend: str) -> None:
        await self.log(AuditEventBuilder.store_connected(backend))

    async def log_demo_data_seeded(self, family_id: str) -> None:
        await self.log(AuditEventBuilder.demo_data_seeded(family_id))

    async def log_storage_error(
        self,
        error_message: str,
        correlation_id: Optional[str] = None,
    ) -> None:
        event = AuditEventBuilder.storage_error(
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Log an unexpected error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> str:
    """
    Create a new correlation ID for tracking related events.

    Used when a request arrives without an X-Request-ID header.
    """
    return str(uuid4())


def bind_correlation_id(correlation_id: str) -> None:
    """Attach a correlation id to every log line of the current request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
