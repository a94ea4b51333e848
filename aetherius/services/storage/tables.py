"""
Relational Table Definitions

One table per entity. Column names follow the Python field names.

DESIGN DECISION: Money is stored as a fixed-precision decimal string,
not as a float or a driver-specific NUMERIC, so SQLite and PostgreSQL
round-trip amounts identically. Nested data (budget categories, goal
contributors, alert data, service details) lives in one JSON column
per row, JSONB on PostgreSQL.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Optional

from pydantic import BaseModel
from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text, TypeDecorator, UniqueConstraint, inspect
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from aetherius.models import (
    AgeGroup,
    AlertSeverity,
    AlertType,
    ContentType,
    Difficulty,
    FinancialServiceType,
    InvestmentType,
    RiskLevel,
    ServiceStatus,
    TransactionType,
)


# =============================================================================
# COLUMN TYPES
# =============================================================================

class EnumString(TypeDecorator):
    """Stores Enum members as their string values."""
    impl = String
    cache_ok = True

    def __init__(self, enum_type, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.enum_type = enum_type

    def process_bind_param(self, value, dialect):
        if value is not None:
            return self.enum_type(value).value
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return self.enum_type(value)
        return value


class DecimalString(TypeDecorator):
    """Stores Decimal amounts as strings with two decimal places."""
    impl = String
    cache_ok = True

    def __init__(self, length: int = 32, **kwargs):
        super().__init__(length, **kwargs)

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(Decimal(value).quantize(Decimal("0.01")))
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return Decimal(value)
        return value


JSONDocument = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")

ID_LENGTH = 36


class Base(AsyncAttrs, DeclarativeBase):
    """Declarative base for every table."""

    # Columns whose values are stored as JSON documents
    json_columns: ClassVar[frozenset[str]] = frozenset()


# =============================================================================
# FAMILY TABLES
# =============================================================================

class FamilyRow(Base):
    __tablename__ = "families"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    total_balance: Mapped[Decimal] = mapped_column(DecimalString())
    created_at: Mapped[datetime] = mapped_column(DateTime)


class FamilyMemberRow(Base):
    __tablename__ = "family_members"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    family_id: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    name: Mapped[str] = mapped_column(String(100))
    role: Mapped[str] = mapped_column(String(50))
    age: Mapped[Optional[int]] = mapped_column(Integer)
    balance: Mapped[Decimal] = mapped_column(DecimalString())
    avatar: Mapped[Optional[str]] = mapped_column(String(100))
    status: Mapped[Optional[str]] = mapped_column(String(100))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


class FamilyGoalRow(Base):
    __tablename__ = "family_goals"
    json_columns = frozenset({"contributors"})

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    family_id: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text)
    target_amount: Mapped[Decimal] = mapped_column(DecimalString())
    current_amount: Mapped[Decimal] = mapped_column(DecimalString())
    deadline: Mapped[Optional[datetime]] = mapped_column(DateTime)
    category: Mapped[Optional[str]] = mapped_column(String(50))
    icon: Mapped[Optional[str]] = mapped_column(String(50))
    contributors: Mapped[list[str]] = mapped_column(JSONDocument)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime)


class BudgetRow(Base):
    __tablename__ = "budgets"
    json_columns = frozenset({"categories"})

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    family_id: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    month: Mapped[str] = mapped_column(String(7), index=True)
    total_budget: Mapped[Decimal] = mapped_column(DecimalString())
    total_spent: Mapped[Decimal] = mapped_column(DecimalString())
    categories: Mapped[dict[str, Any]] = mapped_column(JSONDocument)


class TransactionRow(Base):
    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    family_id: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    member_id: Mapped[Optional[str]] = mapped_column(String(ID_LENGTH))
    amount: Mapped[Decimal] = mapped_column(DecimalString())
    category: Mapped[str] = mapped_column(String(50))
    description: Mapped[Optional[str]] = mapped_column(Text)
    type: Mapped[TransactionType] = mapped_column(EnumString(TransactionType, 20))
    date: Mapped[datetime] = mapped_column(DateTime, index=True)


class SmartAlertRow(Base):
    __tablename__ = "smart_alerts"
    json_columns = frozenset({"data"})

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    family_id: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    type: Mapped[AlertType] = mapped_column(EnumString(AlertType, 20))
    title: Mapped[str] = mapped_column(String(200))
    message: Mapped[str] = mapped_column(Text)
    severity: Mapped[AlertSeverity] = mapped_column(EnumString(AlertSeverity, 10))
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONDocument)
    created_at: Mapped[datetime] = mapped_column(DateTime, index=True)


# =============================================================================
# LEARNING TABLES
# =============================================================================

class EducationalContentRow(Base):
    __tablename__ = "educational_content"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    title: Mapped[str] = mapped_column(String(300))
    description: Mapped[Optional[str]] = mapped_column(Text)
    content: Mapped[str] = mapped_column(Text)
    type: Mapped[ContentType] = mapped_column(EnumString(ContentType, 20))
    category: Mapped[Optional[str]] = mapped_column(String(100))
    age_group: Mapped[Optional[AgeGroup]] = mapped_column(EnumString(AgeGroup, 20))
    duration: Mapped[Optional[int]] = mapped_column(Integer)
    difficulty: Mapped[Optional[Difficulty]] = mapped_column(EnumString(Difficulty, 20))
    icon: Mapped[Optional[str]] = mapped_column(String(50))
    is_ai_generated: Mapped[bool] = mapped_column(Boolean, default=False)


class LearningProgressRow(Base):
    __tablename__ = "learning_progress"
    __table_args__ = (
        UniqueConstraint("member_id", "content_id", name="uq_learning_progress_member_content"),
    )

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    member_id: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    content_id: Mapped[str] = mapped_column(String(ID_LENGTH))
    progress: Mapped[int] = mapped_column(Integer, default=0)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    last_accessed: Mapped[datetime] = mapped_column(DateTime)


# =============================================================================
# CATALOG TABLES
# =============================================================================

class InvestmentRow(Base):
    __tablename__ = "investments"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    type: Mapped[InvestmentType] = mapped_column(EnumString(InvestmentType, 20))
    returns: Mapped[Optional[Decimal]] = mapped_column(DecimalString(12))
    risk: Mapped[Optional[RiskLevel]] = mapped_column(EnumString(RiskLevel, 10))
    description: Mapped[Optional[str]] = mapped_column(Text)
    min_investment: Mapped[Optional[Decimal]] = mapped_column(DecimalString())


class FinancialServiceRow(Base):
    __tablename__ = "financial_services"
    json_columns = frozenset({"details"})

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    family_id: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    type: Mapped[FinancialServiceType] = mapped_column(EnumString(FinancialServiceType, 20))
    name: Mapped[str] = mapped_column(String(200))
    status: Mapped[Optional[ServiceStatus]] = mapped_column(EnumString(ServiceStatus, 20))
    amount: Mapped[Optional[Decimal]] = mapped_column(DecimalString())
    monthly_payment: Mapped[Optional[Decimal]] = mapped_column(DecimalString())
    details: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONDocument)


# =============================================================================
# CONVERSION
# =============================================================================

def column_values(row_type: type[Base], entity: BaseModel) -> dict[str, Any]:
    """
    Map an entity onto the columns of `row_type`.

    JSON columns get the JSON-mode dump (Decimals as strings, enums as
    values); every other column gets the Python value.
    """
    plain = entity.model_dump()
    encoded = entity.model_dump(mode="json")
    return {
        attr.key: (encoded if attr.key in row_type.json_columns else plain)[attr.key]
        for attr in inspect(row_type).column_attrs
    }


def row_values(row: Base) -> dict[str, Any]:
    """Read every mapped column of a loaded row into a dict."""
    return {attr.key: getattr(row, attr.key) for attr in inspect(row).mapper.column_attrs}
