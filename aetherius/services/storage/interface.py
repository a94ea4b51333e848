"""
Abstract Entity Store Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Run against PostgreSQL in production and SQLite in development
2. Use the in-memory store for tests and demos
3. Keep the API handlers decoupled from storage implementation

Every operation is independently atomic on a single record.
There is no transaction spanning several entities: a transaction
insert followed by an alert insert is two separate writes.

Lookups and updates on a missing id return None. That is a normal
outcome ("not found"), not an error; callers turn it into a 404.

Create methods assign a fresh id and timestamps. An input that is
already a full entity (it carries an id) keeps its own; the demo
seeder relies on this to load fixtures with stable ids.
"""

from abc import ABC, abstractmethod
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


DEFAULT_TRANSACTION_LIMIT = 50


class EntityStoreInterface(ABC):
    """
    Abstract interface for all family finance persistence.

    Any storage implementation (PostgreSQL, SQLite, in-memory)
    must implement these methods with identical behaviour.
    """

    backend_name: str = "abstract"

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @abstractmethod
    async def connect(self) -> None:
        """
        Prepare the store for use.

        Called once at process start, before the first request.

        Raises:
            ConnectionError: If the backend can't be reached
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release resources. Called once at shutdown."""
        pass

    @abstractmethod
    async def is_empty(self) -> bool:
        """True when no family has been stored yet."""
        pass

    # -------------------------------------------------------------------------
    # Families
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_family(self, family_id: str) -> Optional[Family]:
        pass

    @abstractmethod
    async def create_family(self, family: FamilyCreate) -> Family:
        """
        Insert a new family.

        Args:
            family: Validated family input

        Returns:
            The stored family with its new id and created_at
        """
        pass

    @abstractmethod
    async def get_family_with_members(
        self,
        family_id: str,
    ) -> Optional[FamilyWithMembers]:
        """
        Fetch a family together with its active members.

        Returns:
            The family and members, or None if the family doesn't exist
        """
        pass

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    @abstractmethod
    async def list_family_members(self, family_id: str) -> list[FamilyMember]:
        """List active members only. Deactivated members are never returned."""
        pass

    @abstractmethod
    async def get_family_member(self, member_id: str) -> Optional[FamilyMember]:
        pass

    @abstractmethod
    async def create_family_member(self, member: FamilyMemberCreate) -> FamilyMember:
        pass

    @abstractmethod
    async def update_family_member(
        self,
        member_id: str,
        updates: FamilyMemberUpdate,
    ) -> Optional[FamilyMember]:
        """
        Apply the fields set on `updates` to a member.

        Returns:
            The updated member, or None if it doesn't exist
        """
        pass

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    @abstractmethod
    async def list_family_goals(self, family_id: str) -> list[FamilyGoal]:
        """List active goals only."""
        pass

    @abstractmethod
    async def get_family_goal(self, goal_id: str) -> Optional[FamilyGoal]:
        pass

    @abstractmethod
    async def create_family_goal(self, goal: FamilyGoalCreate) -> FamilyGoal:
        pass

    @abstractmethod
    async def update_family_goal(
        self,
        goal_id: str,
        updates: FamilyGoalUpdate,
    ) -> Optional[FamilyGoal]:
        pass

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_family_budget(self, family_id: str, month: str) -> Optional[Budget]:
        """
        Get a family's budget for a month ("YYYY-MM").

        Several budgets for the same month are not prevented;
        only one of them is returned.
        """
        pass

    @abstractmethod
    async def get_budget(self, budget_id: str) -> Optional[Budget]:
        pass

    @abstractmethod
    async def create_budget(self, budget: BudgetCreate) -> Budget:
        pass

    @abstractmethod
    async def update_budget(
        self,
        budget_id: str,
        updates: BudgetUpdate,
    ) -> Optional[Budget]:
        """Change limits only. Spend and untouched buckets are kept."""
        pass

    @abstractmethod
    async def record_budget_spend(
        self,
        budget_id: str,
        category: BudgetCategory,
        amount: Decimal,
    ) -> Optional[Budget]:
        """
        Add `amount` to one category's spent and to the budget total.

        This is the only operation that moves budget spend.
        Creating a transaction does not.

        Returns:
            The updated budget, or None if it doesn't exist
        """
        pass

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    @abstractmethod
    async def list_family_transactions(
        self,
        family_id: str,
        limit: int = DEFAULT_TRANSACTION_LIMIT,
    ) -> list[Transaction]:
        """
        List a family's transactions, newest first.

        Args:
            family_id: Owning family
            limit: Maximum number of results
        """
        pass

    @abstractmethod
    async def create_transaction(self, transaction: TransactionCreate) -> Transaction:
        """Append a transaction. Its date is set by the store."""
        pass

    # -------------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------------

    @abstractmethod
    async def list_family_alerts(self, family_id: str) -> list[SmartAlert]:
        """List a family's alerts, newest first."""
        pass

    @abstractmethod
    async def create_alert(self, alert: SmartAlertCreate) -> SmartAlert:
        pass

    @abstractmethod
    async def mark_alert_read(self, alert_id: str) -> Optional[SmartAlert]:
        """
        Set is_read on an alert.

        Idempotent: marking an already-read alert returns it unchanged.

        Returns:
            The alert, or None if it doesn't exist
        """
        pass

    # -------------------------------------------------------------------------
    # Learning
    # -------------------------------------------------------------------------

    @abstractmethod
    async def list_educational_content(
        self,
        content_type: Optional[ContentType] = None,
        age_group: Optional[AgeGroup] = None,
    ) -> list[EducationalContent]:
        """
        List catalog items with optional filters.

        Items stored with age group "all" match any requested age group.
        """
        pass

    @abstractmethod
    async def get_educational_content(self, content_id: str) -> Optional[EducationalContent]:
        pass

    @abstractmethod
    async def create_educational_content(
        self,
        content: EducationalContentCreate,
    ) -> EducationalContent:
        pass

    @abstractmethod
    async def list_learning_progress(self, member_id: str) -> list[LearningProgress]:
        pass

    @abstractmethod
    async def upsert_learning_progress(
        self,
        progress: LearningProgressUpsert,
    ) -> LearningProgress:
        """
        Write progress for a (member_id, content_id) pair.

        An existing record for the pair is updated in place and its
        last_accessed refreshed; otherwise a new record is created.
        There is never more than one record per pair.
        """
        pass

    # -------------------------------------------------------------------------
    # Catalogs
    # -------------------------------------------------------------------------

    @abstractmethod
    async def list_investments(self) -> list[Investment]:
        pass

    @abstractmethod
    async def create_investment(self, investment: InvestmentCreate) -> Investment:
        pass

    @abstractmethod
    async def list_family_financial_services(self, family_id: str) -> list[FinancialService]:
        pass

    @abstractmethod
    async def create_financial_service(
        self,
        service: FinancialServiceCreate,
    ) -> FinancialService:
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
