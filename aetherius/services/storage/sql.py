"""
SQLAlchemy Storage Implementation

DESIGN DECISION: One async engine per store instance, created in
connect() and disposed in close(). Tables are created from metadata at
startup; there are no migrations.

Production runs on PostgreSQL through psycopg. Development and tests
run on SQLite through aiosqlite. An in-memory SQLite URL shares a single
connection so every session sees the same database.

Any SQLAlchemy failure surfaces as StorageError.
"""

from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, AsyncIterator, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, func, or_, select
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from aetherius.config import DatabaseSettings, get_settings
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
    ConnectionError,
    EntityStoreInterface,
    StorageError,
)
from aetherius.services.storage.tables import (
    Base,
    BudgetRow,
    EducationalContentRow,
    FamilyGoalRow,
    FamilyMemberRow,
    FamilyRow,
    FinancialServiceRow,
    InvestmentRow,
    LearningProgressRow,
    SmartAlertRow,
    TransactionRow,
    column_values,
    row_values,
)


ModelT = TypeVar("ModelT", bound=BaseModel)


class SQLAlchemyEntityStore(EntityStoreInterface):
    """
    Relational implementation of the entity store.

    Each operation opens its own session and commits before returning.
    """

    backend_name = "sqlalchemy"

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        self._settings = settings or get_settings().database
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _build_engine(self) -> AsyncEngine:
        url = make_url(self._settings.async_url)
        options: dict[str, Any] = {"echo": self._settings.echo}

        if url.get_backend_name() == "sqlite":
            if url.database in (None, "", ":memory:"):
                options["poolclass"] = StaticPool
                options["connect_args"] = {"check_same_thread": False}
        else:
            options["pool_size"] = self._settings.pool_size
            options["max_overflow"] = self._settings.max_overflow
            options["pool_pre_ping"] = True

        return create_async_engine(url, **options)

    async def _create_tables(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def connect(self) -> None:
        """
        Create the engine and the tables.

        The first round trip is retried with exponential backoff,
        up to `connect_attempts` times.
        """
        if self._engine is not None:
            return

        try:
            self._engine = self._build_engine()
        except ArgumentError as e:
            raise ConnectionError(f"Invalid database URL: {e}") from e

        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

        create_tables = retry(
            stop=stop_after_attempt(self._settings.connect_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type((OperationalError, OSError)),
            reraise=True,
        )(self._create_tables)

        try:
            await create_tables()
        except (SQLAlchemyError, OSError) as e:
            await self.close()
            raise ConnectionError(f"Failed to connect to database: {e}") from e

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        if self._session_factory is None:
            raise StorageError("Store is not connected")
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            raise StorageError(f"Database operation failed: {e}") from e

    async def is_empty(self) -> bool:
        async with self._session() as session:
            count = await session.scalar(select(func.count()).select_from(FamilyRow))
        return not count

    # -------------------------------------------------------------------------
    # Generic helpers
    # -------------------------------------------------------------------------

    async def _insert(self, row_type: type[Base], entity: ModelT) -> ModelT:
        async with self._session() as session:
            session.add(row_type(**column_values(row_type, entity)))
            await session.commit()
        return entity

    async def _get(self, row_type: type[Base], model: type[ModelT], entity_id: str) -> Optional[ModelT]:
        async with self._session() as session:
            row = await session.get(row_type, entity_id)
        if row is None:
            return None
        return model.model_validate(row_values(row))

    async def _list(self, model: type[ModelT], statement: Select) -> list[ModelT]:
        async with self._session() as session:
            rows = (await session.scalars(statement)).all()
        return [model.model_validate(row_values(row)) for row in rows]

    async def _update(
        self,
        row_type: type[Base],
        model: type[ModelT],
        entity_id: str,
        updates: BaseModel,
    ) -> Optional[ModelT]:
        async with self._session() as session:
            row = await session.get(row_type, entity_id)
            if row is None:
                return None

            updated = merge_update(model.model_validate(row_values(row)), updates)
            for key, value in column_values(row_type, updated).items():
                setattr(row, key, value)
            await session.commit()
        return updated

    # -------------------------------------------------------------------------
    # Families
    # -------------------------------------------------------------------------

    async def get_family(self, family_id: str) -> Optional[Family]:
        return await self._get(FamilyRow, Family, family_id)

    async def create_family(self, family: FamilyCreate) -> Family:
        return await self._insert(FamilyRow, Family(**family.model_dump()))

    async def get_family_with_members(
        self,
        family_id: str,
    ) -> Optional[FamilyWithMembers]:
        family = await self.get_family(family_id)
        if family is None:
            return None
        members = await self.list_family_members(family_id)
        return FamilyWithMembers(family=family, members=members)

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    async def list_family_members(self, family_id: str) -> list[FamilyMember]:
        return await self._list(
            FamilyMember,
            select(FamilyMemberRow).where(
                FamilyMemberRow.family_id == family_id,
                FamilyMemberRow.is_active.is_(True),
            ),
        )

    async def get_family_member(self, member_id: str) -> Optional[FamilyMember]:
        return await self._get(FamilyMemberRow, FamilyMember, member_id)

    async def create_family_member(self, member: FamilyMemberCreate) -> FamilyMember:
        return await self._insert(FamilyMemberRow, FamilyMember(**member.model_dump()))

    async def update_family_member(
        self,
        member_id: str,
        updates: FamilyMemberUpdate,
    ) -> Optional[FamilyMember]:
        return await self._update(FamilyMemberRow, FamilyMember, member_id, updates)

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    async def list_family_goals(self, family_id: str) -> list[FamilyGoal]:
        return await self._list(
            FamilyGoal,
            select(FamilyGoalRow).where(
                FamilyGoalRow.family_id == family_id,
                FamilyGoalRow.is_active.is_(True),
            ),
        )

    async def get_family_goal(self, goal_id: str) -> Optional[FamilyGoal]:
        return await self._get(FamilyGoalRow, FamilyGoal, goal_id)

    async def create_family_goal(self, goal: FamilyGoalCreate) -> FamilyGoal:
        return await self._insert(FamilyGoalRow, FamilyGoal(**goal.model_dump()))

    async def update_family_goal(
        self,
        goal_id: str,
        updates: FamilyGoalUpdate,
    ) -> Optional[FamilyGoal]:
        return await self._update(FamilyGoalRow, FamilyGoal, goal_id, updates)

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    async def get_family_budget(self, family_id: str, month: str) -> Optional[Budget]:
        budgets = await self._list(
            Budget,
            select(BudgetRow)
            .where(BudgetRow.family_id == family_id, BudgetRow.month == month)
            .limit(1),
        )
        return budgets[0] if budgets else None

    async def get_budget(self, budget_id: str) -> Optional[Budget]:
        return await self._get(BudgetRow, Budget, budget_id)

    async def create_budget(self, budget: BudgetCreate) -> Budget:
        return await self._insert(BudgetRow, Budget(**budget.model_dump()))

    async def update_budget(
        self,
        budget_id: str,
        updates: BudgetUpdate,
    ) -> Optional[Budget]:
        async with self._session() as session:
            row = await session.get(BudgetRow, budget_id)
            if row is None:
                return None

            updated = Budget.model_validate(row_values(row)).with_limits(updates)
            values = column_values(BudgetRow, updated)
            row.categories = values["categories"]
            row.total_budget = values["total_budget"]
            await session.commit()
        return updated

    async def record_budget_spend(
        self,
        budget_id: str,
        category: BudgetCategory,
        amount: Decimal,
    ) -> Optional[Budget]:
        async with self._session() as session:
            row = await session.get(BudgetRow, budget_id)
            if row is None:
                return None

            updated = Budget.model_validate(row_values(row)).with_spend(category, amount)
            values = column_values(BudgetRow, updated)
            row.categories = values["categories"]
            row.total_spent = values["total_spent"]
            await session.commit()
        return updated

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    async def list_family_transactions(
        self,
        family_id: str,
        limit: int = DEFAULT_TRANSACTION_LIMIT,
    ) -> list[Transaction]:
        return await self._list(
            Transaction,
            select(TransactionRow)
            .where(TransactionRow.family_id == family_id)
            .order_by(TransactionRow.date.desc())
            .limit(limit),
        )

    async def create_transaction(self, transaction: TransactionCreate) -> Transaction:
        return await self._insert(TransactionRow, Transaction(**transaction.model_dump()))

    # -------------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------------

    async def list_family_alerts(self, family_id: str) -> list[SmartAlert]:
        return await self._list(
            SmartAlert,
            select(SmartAlertRow)
            .where(SmartAlertRow.family_id == family_id)
            .order_by(SmartAlertRow.created_at.desc()),
        )

    async def create_alert(self, alert: SmartAlertCreate) -> SmartAlert:
        return await self._insert(SmartAlertRow, SmartAlert.model_validate(alert.model_dump()))

    async def mark_alert_read(self, alert_id: str) -> Optional[SmartAlert]:
        async with self._session() as session:
            row = await session.get(SmartAlertRow, alert_id)
            if row is None:
                return None
            if not row.is_read:
                row.is_read = True
                await session.commit()
            return SmartAlert.model_validate(row_values(row))

    # -------------------------------------------------------------------------
    # Learning
    # -------------------------------------------------------------------------

    async def list_educational_content(
        self,
        content_type: Optional[ContentType] = None,
        age_group: Optional[AgeGroup] = None,
    ) -> list[EducationalContent]:
        statement = select(EducationalContentRow)
        if content_type is not None:
            statement = statement.where(EducationalContentRow.type == content_type)
        if age_group is not None:
            statement = statement.where(
                or_(
                    EducationalContentRow.age_group == age_group,
                    EducationalContentRow.age_group == AgeGroup.ALL,
                )
            )
        return await self._list(EducationalContent, statement)

    async def get_educational_content(self, content_id: str) -> Optional[EducationalContent]:
        return await self._get(EducationalContentRow, EducationalContent, content_id)

    async def create_educational_content(
        self,
        content: EducationalContentCreate,
    ) -> EducationalContent:
        return await self._insert(
            EducationalContentRow,
            EducationalContent.model_validate(content.model_dump()),
        )

    async def list_learning_progress(self, member_id: str) -> list[LearningProgress]:
        return await self._list(
            LearningProgress,
            select(LearningProgressRow).where(LearningProgressRow.member_id == member_id),
        )

    async def upsert_learning_progress(
        self,
        progress: LearningProgressUpsert,
    ) -> LearningProgress:
        async with self._session() as session:
            row = await session.scalar(
                select(LearningProgressRow).where(
                    LearningProgressRow.member_id == progress.member_id,
                    LearningProgressRow.content_id == progress.content_id,
                )
            )

            if row is None:
                stored = LearningProgress(**progress.model_dump())
                session.add(LearningProgressRow(**column_values(LearningProgressRow, stored)))
            else:
                existing = LearningProgress.model_validate(row_values(row))
                stored = merge_update(existing, progress, last_accessed=utcnow())
                for key, value in column_values(LearningProgressRow, stored).items():
                    setattr(row, key, value)

            await session.commit()
        return stored

    # -------------------------------------------------------------------------
    # Catalogs
    # -------------------------------------------------------------------------

    async def list_investments(self) -> list[Investment]:
        return await self._list(Investment, select(InvestmentRow))

    async def create_investment(self, investment: InvestmentCreate) -> Investment:
        return await self._insert(InvestmentRow, Investment(**investment.model_dump()))

    async def list_family_financial_services(self, family_id: str) -> list[FinancialService]:
        return await self._list(
            FinancialService,
            select(FinancialServiceRow).where(FinancialServiceRow.family_id == family_id),
        )

    async def create_financial_service(
        self,
        service: FinancialServiceCreate,
    ) -> FinancialService:
        return await self._insert(
            FinancialServiceRow,
            FinancialService.model_validate(service.model_dump()),
        )
