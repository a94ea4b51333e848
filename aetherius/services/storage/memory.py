"""
In-Memory Entity Store

Keeps every entity in a plain dict keyed by id. State lives as long as
the store instance: it is not shared between processes and is lost on
restart. Intended for tests, demos and local development.

No method awaits anything internally, so each operation runs to
completion without interleaving with other requests on the event loop.
"""

from decimal import Decimal
from typing import Optional

from aetherius.models import (
    AgeGroup,
    Budget,
    BudgetCategory,
    BudgetCreate,
    BudgetUpdate,
    ContentType,
    EducationalContent,
    EducationalContentCreate,
    Family,
    FamilyCreate,
    FamilyGoal,
    FamilyGoalCreate,
    FamilyGoalUpdate,
    FamilyMember,
    FamilyMemberCreate,
    FamilyMemberUpdate,
    FamilyWithMembers,
    FinancialService,
    FinancialServiceCreate,
    Investment,
    InvestmentCreate,
    LearningProgress,
    LearningProgressUpsert,
    SmartAlert,
    SmartAlertCreate,
    Transaction,
    TransactionCreate,
)
from aetherius.models.common import merge_update, utcnow
from aetherius.services.storage.interface import (
    DEFAULT_TRANSACTION_LIMIT,
    EntityStoreInterface,
)


class InMemoryEntityStore(EntityStoreInterface):
    """Process-local implementation of the entity store."""

    backend_name = "memory"

    def __init__(self):
        self._families: dict[str, Family] = {}
        self._members: dict[str, FamilyMember] = {}
        self._goals: dict[str, FamilyGoal] = {}
        self._budgets: dict[str, Budget] = {}
        self._transactions: dict[str, Transaction] = {}
        self._alerts: dict[str, SmartAlert] = {}
        self._content: dict[str, EducationalContent] = {}
        self._progress: dict[str, LearningProgress] = {}
        self._investments: dict[str, Investment] = {}
        self._services: dict[str, FinancialService] = {}

    async def connect(self) -> None:
        return None

    async def close(self) -> None:
        return None

    async def is_empty(self) -> bool:
        return not self._families

    # -------------------------------------------------------------------------
    # Families
    # -------------------------------------------------------------------------

    async def get_family(self, family_id: str) -> Optional[Family]:
        return self._families.get(family_id)

    async def create_family(self, family: FamilyCreate) -> Family:
        stored = Family(**family.model_dump())
        self._families[stored.id] = stored
        return stored

    async def get_family_with_members(
        self,
        family_id: str,
    ) -> Optional[FamilyWithMembers]:
        family = self._families.get(family_id)
        if family is None:
            return None
        members = await self.list_family_members(family_id)
        return FamilyWithMembers(family=family, members=members)

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    async def list_family_members(self, family_id: str) -> list[FamilyMember]:
        return [
            member for member in self._members.values()
            if member.family_id == family_id and member.is_active
        ]

    async def get_family_member(self, member_id: str) -> Optional[FamilyMember]:
        return self._members.get(member_id)

    async def create_family_member(self, member: FamilyMemberCreate) -> FamilyMember:
        stored = FamilyMember(**member.model_dump())
        self._members[stored.id] = stored
        return stored

    async def update_family_member(
        self,
        member_id: str,
        updates: FamilyMemberUpdate,
    ) -> Optional[FamilyMember]:
        existing = self._members.get(member_id)
        if existing is None:
            return None
        updated = merge_update(existing, updates)
        self._members[member_id] = updated
        return updated

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    async def list_family_goals(self, family_id: str) -> list[FamilyGoal]:
        return [
            goal for goal in self._goals.values()
            if goal.family_id == family_id and goal.is_active
        ]

    async def get_family_goal(self, goal_id: str) -> Optional[FamilyGoal]:
        return self._goals.get(goal_id)

    async def create_family_goal(self, goal: FamilyGoalCreate) -> FamilyGoal:
        stored = FamilyGoal(**goal.model_dump())
        self._goals[stored.id] = stored
        return stored

    async def update_family_goal(
        self,
        goal_id: str,
        updates: FamilyGoalUpdate,
    ) -> Optional[FamilyGoal]:
        existing = self._goals.get(goal_id)
        if existing is None:
            return None
        updated = merge_update(existing, updates)
        self._goals[goal_id] = updated
        return updated

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    async def get_family_budget(self, family_id: str, month: str) -> Optional[Budget]:
        for budget in self._budgets.values():
            if budget.family_id == family_id and budget.month == month:
                return budget
        return None

    async def get_budget(self, budget_id: str) -> Optional[Budget]:
        return self._budgets.get(budget_id)

    async def create_budget(self, budget: BudgetCreate) -> Budget:
        stored = Budget(**budget.model_dump())
        self._budgets[stored.id] = stored
        return stored

    async def update_budget(
        self,
        budget_id: str,
        updates: BudgetUpdate,
    ) -> Optional[Budget]:
        existing = self._budgets.get(budget_id)
        if existing is None:
            return None
        updated = existing.with_limits(updates)
        self._budgets[budget_id] = updated
        return updated

    async def record_budget_spend(
        self,
        budget_id: str,
        category: BudgetCategory,
        amount: Decimal,
    ) -> Optional[Budget]:
        existing = self._budgets.get(budget_id)
        if existing is None:
            return None

        updated = existing.with_spend(category, amount)
        self._budgets[budget_id] = updated
        return updated

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    async def list_family_transactions(
        self,
        family_id: str,
        limit: int = DEFAULT_TRANSACTION_LIMIT,
    ) -> list[Transaction]:
        # Reversed first so equal timestamps still come out newest first
        owned = [t for t in reversed(self._transactions.values()) if t.family_id == family_id]
        owned.sort(key=lambda t: t.date, reverse=True)
        return owned[:limit]

    async def create_transaction(self, transaction: TransactionCreate) -> Transaction:
        stored = Transaction(**transaction.model_dump())
        self._transactions[stored.id] = stored
        return stored

    # -------------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------------

    async def list_family_alerts(self, family_id: str) -> list[SmartAlert]:
        owned = [a for a in reversed(self._alerts.values()) if a.family_id == family_id]
        owned.sort(key=lambda a: a.created_at, reverse=True)
        return owned

    async def create_alert(self, alert: SmartAlertCreate) -> SmartAlert:
        stored = SmartAlert.model_validate(alert.model_dump())
        self._alerts[stored.id] = stored
        return stored

    async def mark_alert_read(self, alert_id: str) -> Optional[SmartAlert]:
        existing = self._alerts.get(alert_id)
        if existing is None:
            return None
        if existing.is_read:
            return existing
        updated = SmartAlert.model_validate({**existing.model_dump(), "is_read": True})
        self._alerts[alert_id] = updated
        return updated

    # -------------------------------------------------------------------------
    # Learning
    # -------------------------------------------------------------------------

    async def list_educational_content(
        self,
        content_type: Optional[ContentType] = None,
        age_group: Optional[AgeGroup] = None,
    ) -> list[EducationalContent]:
        return [
            item for item in self._content.values()
            if item.matches(content_type, age_group)
        ]

    async def get_educational_content(self, content_id: str) -> Optional[EducationalContent]:
        return self._content.get(content_id)

    async def create_educational_content(
        self,
        content: EducationalContentCreate,
    ) -> EducationalContent:
        stored = EducationalContent.model_validate(content.model_dump())
        self._content[stored.id] = stored
        return stored

    async def list_learning_progress(self, member_id: str) -> list[LearningProgress]:
        return [p for p in self._progress.values() if p.member_id == member_id]

    async def upsert_learning_progress(
        self,
        progress: LearningProgressUpsert,
    ) -> LearningProgress:
        for existing in self._progress.values():
            if (
                existing.member_id == progress.member_id
                and existing.content_id == progress.content_id
            ):
                updated = merge_update(existing, progress, last_accessed=utcnow())
                self._progress[existing.id] = updated
                return updated

        stored = LearningProgress(**progress.model_dump())
        self._progress[stored.id] = stored
        return stored

    # -------------------------------------------------------------------------
    # Catalogs
    # -------------------------------------------------------------------------

    async def list_investments(self) -> list[Investment]:
        return list(self._investments.values())

    async def create_investment(self, investment: InvestmentCreate) -> Investment:
        stored = Investment(**investment.model_dump())
        self._investments[stored.id] = stored
        return stored

    async def list_family_financial_services(self, family_id: str) -> list[FinancialService]:
        return [s for s in self._services.values() if s.family_id == family_id]

    async def create_financial_service(
        self,
        service: FinancialServiceCreate,
    ) -> FinancialService:
        stored = FinancialService.model_validate(service.model_dump())
        self._services[stored.id] = stored
        return stored
