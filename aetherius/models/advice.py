"""
Advice Models

Request bodies for the AI endpoints and the structured results
the text-generation service must return.

CRITICAL: Generated results are untrusted input.
Every field below without a default is required; a model reply
missing one of them is rejected rather than patched up.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field

from aetherius.models.common import CamelModel, Money
from aetherius.models.education import AgeGroup, Difficulty
from aetherius.models.family import TransactionType


# =============================================================================
# FINANCIAL ADVICE (free text)
# =============================================================================

class AdviceContext(CamelModel):
    """Optional family facts folded into the advice prompt."""

    family_id: Optional[str] = None
    current_goals: Optional[list[str]] = None
    budget_usage: Optional[float] = Field(default=None, ge=0)
    total_balance: Optional[str] = None
    member_count: Optional[int] = Field(default=None, ge=0)


class AdviceRequest(CamelModel):
    question: str = Field(..., min_length=1, max_length=2000)
    context: Optional[AdviceContext] = None


class AdviceResponse(CamelModel):
    advice: str


# =============================================================================
# EDUCATIONAL CONTENT
# =============================================================================

class ContentGenerationRequest(CamelModel):
    topic: str = Field(..., min_length=1, max_length=100)
    age_group: AgeGroup
    difficulty: Difficulty


class GeneratedLesson(CamelModel):
    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1, max_length=2000)
    content: str = Field(..., min_length=1)
    duration: int = Field(..., gt=0, description="Reading time in minutes")


# =============================================================================
# SPENDING ANALYSIS
# =============================================================================

class SpendingTransaction(CamelModel):
    amount: Money
    category: str
    type: TransactionType
    date: datetime


class SpendingAnalysisRequest(CamelModel):
    transactions: list[SpendingTransaction] = Field(default_factory=list)
    budget_limits: dict[str, Decimal] = Field(default_factory=dict)


class SpendingAnalysis(CamelModel):
    insights: list[str]
    recommendations: list[str]
    risk_level: Literal["low", "medium", "high"]


# =============================================================================
# SCAM CHECK
# =============================================================================

class ScamCheckRequest(CamelModel):
    amount: Money
    description: str = Field(..., max_length=1000)
    recipient: str = Field(..., max_length=200)
    method: str = Field(..., max_length=50, description="UPI, card, bank transfer, ...")
    timestamp: str


class ScamAssessment(CamelModel):
    is_scam_likely: bool
    confidence: float = Field(..., ge=0, le=100)
    reasons: list[str]
    recommendations: list[str]


# =============================================================================
# GOAL PLANNING
# =============================================================================

class GoalSummary(CamelModel):
    name: str = Field(..., min_length=1)
    target_amount: Money
    timeframe: str = Field(..., min_length=1, description="e.g. '18 months'")
    priority: Literal["high", "medium", "low"]


class FamilyFinances(CamelModel):
    monthly_income: Money
    monthly_expenses: Money
    current_savings: Money
    member_count: int = Field(..., ge=1)


class GoalPlanRequest(CamelModel):
    goal: GoalSummary
    family_finances: FamilyFinances


class GoalPlan(CamelModel):
    monthly_contribution: float = Field(..., ge=0)
    strategies: list[str]
    timeline: str
    feasibility_score: float = Field(..., ge=0, le=100)
    recommendations: list[str]
