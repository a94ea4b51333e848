"""
Main Orchestrator for Aetherius

This module ties together all the components and defines the flows
that touch more than one of them:
1. Transaction (store transaction -> evaluate overspending rule -> audit)
2. Budget spend and limits (lock categories -> write budget)
3. Alert read (mark read -> audit)
4. Lesson generation (generate -> store in catalog -> audit)

DESIGN DECISION: There is no module-level store or gateway.
create_app_components() builds one set of components per application,
so tests get fully isolated instances.
"""

from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import Optional

from aetherius.agents import AdviceGateway, GeminiTextGenerator, TextGenerator
from aetherius.alerts import AlertRuleEvaluator
from aetherius.audit import AuditLogger
from aetherius.config import Settings, get_settings
from aetherius.models import (
    Budget,
    BudgetSpend,
    BudgetUpdate,
    ContentGenerationRequest,
    ContentType,
    EducationalContent,
    EducationalContentCreate,
    SmartAlert,
    Transaction,
    TransactionCreate,
    TransactionFields,
)
from aetherius.services.storage import EntityStoreInterface, create_entity_store


# Catalog fields for lessons produced by the AI
GENERATED_LESSON_ICON = "brain"


class TransactionFlow:
    """
    Orchestrates transaction recording.

    Flow:
    1. Store the transaction (the store sets its date)
    2. Run the overspending rule for expenses
    3. Audit both writes

    The transaction and the alert are two separate writes. If the alert
    write fails the transaction stays recorded.
    """

    def __init__(
        self,
        store: EntityStoreInterface,
        evaluator: AlertRuleEvaluator,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._evaluator = evaluator
        self._audit = audit_logger or AuditLogger()

    async def record(
        self,
        family_id: str,
        fields: TransactionFields,
    ) -> tuple[Transaction, Optional[SmartAlert]]:
        """
        Record a transaction for a family.

        Returns:
            (stored_transaction, alert_or_none)
        """
        transaction = await self._store.create_transaction(
            TransactionCreate(family_id=family_id, **fields.model_dump())
        )
        await self._audit.log_transaction_recorded(transaction)

        alert = await self._evaluator.on_transaction(transaction)
        return transaction, alert


class BudgetFlow:
    """Orchestrates budget spend recording and limit changes."""

    def __init__(
        self,
        store: EntityStoreInterface,
        evaluator: AlertRuleEvaluator,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._evaluator = evaluator
        self._audit = audit_logger or AuditLogger()

    async def record_spend(self, budget_id: str, spend: BudgetSpend) -> Optional[Budget]:
        """
        Add spend to one category of a budget.

        Runs under the same category lock as the overspending rule, so
        an evaluation never sees a half-applied spend.

        Returns:
            The updated budget, or None if it doesn't exist
        """
        budget = await self._store.get_budget(budget_id)
        if budget is None:
            return None

        lock = self._evaluator.category_lock(budget.family_id, budget.month, spend.category.value)
        async with lock:
            updated = await self._store.record_budget_spend(budget_id, spend.category, spend.amount)

        if updated is not None:
            await self._audit.log_budget_spend_recorded(updated, spend.category, spend.amount)
        return updated

    async def update_limits(self, budget_id: str, updates: BudgetUpdate) -> Optional[Budget]:
        """
        Change a budget's limits.

        Holds the lock of every bucket whose limit changes, taken in a
        fixed order, so no evaluation reads a limit mid-change.

        Returns:
            The updated budget, or None if it doesn't exist
        """
        budget = await self._store.get_budget(budget_id)
        if budget is None:
            return None

        async with AsyncExitStack() as stack:
            for category in updates.touched_categories():
                await stack.enter_async_context(
                    self._evaluator.category_lock(budget.family_id, budget.month, category.value)
                )
            return await self._store.update_budget(budget_id, updates)


class AlertFlow:
    def __init__(
        self,
        store: EntityStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit = audit_logger or AuditLogger()

    async def mark_read(self, alert_id: str) -> Optional[SmartAlert]:
        """Mark an alert read. Returns None for an unknown id."""
        alert = await self._store.mark_alert_read(alert_id)
        if alert is not None:
            await self._audit.log_alert_read(alert)
        return alert


class LearningFlow:
    """
    Orchestrates AI lesson generation.

    Flow:
    1. Ask the gateway for a lesson
    2. Store it in the catalog as an AI-generated lesson
    3. Audit the stored item
    """

    def __init__(
        self,
        store: EntityStoreInterface,
        gateway: AdviceGateway,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._gateway = gateway
        self._audit = audit_logger or AuditLogger()

    async def generate_lesson(self, request: ContentGenerationRequest) -> EducationalContent:
        lesson = await self._gateway.generate_educational_content(
            request.topic,
            request.age_group,
            request.difficulty,
        )

        content = await self._store.create_educational_content(
            EducationalContentCreate(
                title=lesson.title,
                description=lesson.description,
                content=lesson.content,
                type=ContentType.LESSON,
                category=request.topic,
                age_group=request.age_group,
                duration=lesson.duration,
                difficulty=request.difficulty,
                icon=GENERATED_LESSON_ICON,
                is_ai_generated=True,
            )
        )
        await self._audit.log_content_generated(content, request.topic)
        return content


@dataclass
class AppComponents:
    """Everything the API needs, built once per application."""

    settings: Settings
    store: EntityStoreInterface
    gateway: AdviceGateway
    evaluator: AlertRuleEvaluator
    transactions: TransactionFlow
    budgets: BudgetFlow
    alerts: AlertFlow
    learning: LearningFlow
    audit: AuditLogger


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[EntityStoreInterface] = None,
    generator: Optional[TextGenerator] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to build from. Defaults to get_settings().
        store: Entity store to use. Defaults to the store selected by
               DATABASE_URL (in-memory when unset).
        generator: Text generator to use. Defaults to Gemini.

    Returns:
        The wired components. The store is not connected yet.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    gemini_settings = settings.gemini

    audit_logger = AuditLogger()
    store = store or create_entity_store(settings.database)
    generator = generator or GeminiTextGenerator(gemini_settings)

    gateway = AdviceGateway(generator, gemini_settings, audit_logger)
    evaluator = AlertRuleEvaluator(
        store,
        threshold=app_settings.overspending_threshold,
        audit_logger=audit_logger,
    )

    return AppComponents(
        settings=settings,
        store=store,
        gateway=gateway,
        evaluator=evaluator,
        transactions=TransactionFlow(store, evaluator, audit_logger),
        budgets=BudgetFlow(store, evaluator, audit_logger),
        alerts=AlertFlow(store, audit_logger),
        learning=LearningFlow(store, gateway, audit_logger),
        audit=audit_logger,
    )
