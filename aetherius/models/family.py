"""
Core Family Finance Models

These models define the strict schemas for all household data:
families, members, savings goals, monthly budgets and transactions.

Each entity comes in three shapes:
- *Fields: what a client may send in a request body
- *Create: the validated insert (adds the owning family id)
- the entity itself: what the store returns (adds id and timestamps)

DESIGN DECISION: Amounts are Decimal, never float.
They are serialized as decimal strings to avoid binary rounding errors.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field, computed_field

from aetherius.models.common import (
    CamelModel,
    Money,
    NonNegativeMoney,
    PositiveMoney,
    new_id,
    round_half_up,
    utcnow,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a money movement."""
    INCOME = "income"
    EXPENSE = "expense"
    SAVING = "saving"
    INVESTMENT = "investment"


class BudgetCategory(str, Enum):
    """
    The fixed spending buckets of a monthly budget.

    DESIGN DECISION: The set is closed. A budget can't grow new buckets,
    which keeps the alert rules and the dashboard in step.
    """
    FOOD = "food"
    TRANSPORT = "transport"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    UTILITIES = "utilities"
    HEALTHCARE = "healthcare"


# =============================================================================
# FAMILY
# =============================================================================

class FamilyCreate(CamelModel):
    """Input for creating a family."""

    name: str = Field(..., min_length=1, max_length=200)
    total_balance: Money = Field(
        default=Decimal("0.00"),
        description="Display aggregate; not derived from transactions"
    )


class Family(FamilyCreate):
    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utcnow)


# =============================================================================
# MEMBERS
# =============================================================================

class FamilyMemberFields(CamelModel):
    """Member attributes a client may send."""

    name: str = Field(..., min_length=1, max_length=100)
    role: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="e.g. Family Head, Co-Manager, Student, Junior Saver"
    )
    age: Optional[int] = Field(default=None, ge=0, le=130)
    balance: Money = Field(default=Decimal("0.00"))
    avatar: Optional[str] = Field(default=None, max_length=100)
    status: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Free-form badge such as 'Top Saver'"
    )
    is_active: bool = True


class FamilyMemberCreate(FamilyMemberFields):
    family_id: str = Field(..., min_length=1)


class FamilyMember(FamilyMemberCreate):
    id: str = Field(default_factory=new_id)


class FamilyMemberUpdate(CamelModel):
    """Partial member update. Setting is_active=False deactivates the member."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    role: Optional[str] = Field(default=None, min_length=1, max_length=50)
    age: Optional[int] = Field(default=None, ge=0, le=130)
    balance: Optional[Money] = None
    avatar: Optional[str] = Field(default=None, max_length=100)
    status: Optional[str] = Field(default=None, max_length=100)
    is_active: Optional[bool] = None


class FamilyWithMembers(CamelModel):
    family: Family
    members: list[FamilyMember] = Field(default_factory=list)


# =============================================================================
# GOALS
# =============================================================================

class FamilyGoalFields(CamelModel):
    """Goal attributes a client may send."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    target_amount: NonNegativeMoney
    current_amount: NonNegativeMoney = Decimal("0.00")
    deadline: Optional[datetime] = None
    category: Optional[str] = Field(
        default=None,
        max_length=50,
        description="vacation, emergency, education, ..."
    )
    icon: Optional[str] = Field(default=None, max_length=50)
    contributors: list[str] = Field(
        default_factory=list,
        description="Member ids; not checked against the member table"
    )
    is_active: bool = True


class FamilyGoalCreate(FamilyGoalFields):
    family_id: str = Field(..., min_length=1)


class FamilyGoal(FamilyGoalCreate):
    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def percentage(self) -> int:
        """Progress towards the target, rounded to a whole percent."""
        if not self.target_amount:
            return 0
        return round_half_up(self.current_amount / self.target_amount * 100)


class FamilyGoalUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    target_amount: Optional[NonNegativeMoney] = None
    current_amount: Optional[NonNegativeMoney] = None
    deadline: Optional[datetime] = None
    category: Optional[str] = Field(default=None, max_length=50)
    icon: Optional[str] = Field(default=None, max_length=50)
    contributors: Optional[list[str]] = None
    is_active: Optional[bool] = None


# =============================================================================
# BUDGETS
# =============================================================================

class CategoryBudget(CamelModel):
    budget: NonNegativeMoney = Decimal("0.00")
    spent: NonNegativeMoney = Decimal("0.00")


class BudgetCategories(CamelModel):
    """
    Per-category limits and spend for one month.

    Unknown bucket names are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    food: CategoryBudget = Field(default_factory=CategoryBudget)
    transport: CategoryBudget = Field(default_factory=CategoryBudget)
    entertainment: CategoryBudget = Field(default_factory=CategoryBudget)
    shopping: CategoryBudget = Field(default_factory=CategoryBudget)
    utilities: CategoryBudget = Field(default_factory=CategoryBudget)
    healthcare: CategoryBudget = Field(default_factory=CategoryBudget)

    def get(self, category: str) -> Optional[CategoryBudget]:
        """Look up a bucket by name; None for anything outside the fixed set."""
        try:
            key = BudgetCategory(category.strip().lower())
        except ValueError:
            return None
        return getattr(self, key.value)


MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class BudgetFields(CamelModel):
    """Budget attributes a client may send."""

    month: str = Field(
        ...,
        pattern=MONTH_PATTERN,
        description="Budget month as YYYY-MM"
    )
    total_budget: NonNegativeMoney
    total_spent: NonNegativeMoney = Decimal("0.00")
    categories: BudgetCategories = Field(default_factory=BudgetCategories)


class BudgetCreate(BudgetFields):
    family_id: str = Field(..., min_length=1)


class Budget(BudgetCreate):
    id: str = Field(default_factory=new_id)

    def with_spend(self, category: BudgetCategory, amount: Decimal) -> "Budget":
        """Copy of this budget with `amount` added to one bucket and to the total."""
        data = self.model_dump()
        bucket = data["categories"][category.value]
        bucket["spent"] = bucket["spent"] + amount
        data["total_spent"] = data["total_spent"] + amount
        return Budget.model_validate(data)

    def with_limits(self, updates: "BudgetUpdate") -> "Budget":
        """
        Copy of this budget with new limits applied bucket by bucket.

        Spend is carried over untouched, as is every bucket the update
        leaves out.
        """
        data = self.model_dump()
        if updates.total_budget is not None:
            data["total_budget"] = updates.total_budget
        for category in updates.touched_categories():
            limit = getattr(updates.categories, category.value).budget
            if limit is not None:
                data["categories"][category.value]["budget"] = limit
        return Budget.model_validate(data)


class CategoryLimitUpdate(CamelModel):
    budget: Optional[NonNegativeMoney] = None


class BudgetCategoriesUpdate(CamelModel):
    """New limits for some buckets. Buckets left out keep their limit."""

    model_config = ConfigDict(extra="forbid")

    food: Optional[CategoryLimitUpdate] = None
    transport: Optional[CategoryLimitUpdate] = None
    entertainment: Optional[CategoryLimitUpdate] = None
    shopping: Optional[CategoryLimitUpdate] = None
    utilities: Optional[CategoryLimitUpdate] = None
    healthcare: Optional[CategoryLimitUpdate] = None


class BudgetUpdate(CamelModel):
    """
    Changes to a budget's limits.

    DESIGN DECISION: spend is not editable here. It only moves through
    the spend operation, so totals and per-bucket spend stay consistent.
    """

    total_budget: Optional[NonNegativeMoney] = None
    categories: Optional[BudgetCategoriesUpdate] = None

    def touched_categories(self) -> list[BudgetCategory]:
        """Buckets whose limit this update changes, in a stable order."""
        if self.categories is None:
            return []
        return [
            category for category in BudgetCategory
            if getattr(self.categories, category.value) is not None
        ]


class BudgetSpend(CamelModel):
    """An amount to add to one bucket's spend (and to the budget total)."""

    category: BudgetCategory
    amount: PositiveMoney


def month_key(moment: datetime) -> str:
    """Budget month ("YYYY-MM") a timestamp falls into."""
    return moment.strftime("%Y-%m")


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionFields(CamelModel):
    """Transaction attributes a client may send."""

    member_id: Optional[str] = None
    amount: PositiveMoney
    category: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    type: TransactionType


class TransactionCreate(TransactionFields):
    family_id: str = Field(..., min_length=1)


class Transaction(TransactionCreate):
    """A recorded money movement. Transactions are append-only."""

    id: str = Field(default_factory=new_id)
    date: datetime = Field(default_factory=utcnow)
