"""
Advice Gateway for Aetherius

Formats family context into prompts and forwards them to the
text-generation service.

CRITICAL BOUNDARIES:

1. ADVICE (free text):
   - CAN: Answer a family's money question in plain language
   - CANNOT: Read or change stored data

2. STRUCTURED OPERATIONS (lesson, spending analysis, scam check, goal plan):
   - MUST: Return a JSON document with every required field
   - A reply that is empty, not JSON, or missing a field is an error
   - Replies are NEVER patched up with defaults

One request per operation. No retries, no streaming, no caching.
Every failure surfaces as GenerationError.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, TypeVar

from pydantic import BaseModel, ValidationError

from aetherius.agents.gemini import TextGenerator
from aetherius.audit import AuditLogger
from aetherius.config import GeminiSettings, get_settings
from aetherius.models import (
    AdviceContext,
    AgeGroup,
    Difficulty,
    FamilyFinances,
    GeneratedLesson,
    GoalPlan,
    GoalSummary,
    ScamAssessment,
    ScamCheckRequest,
    SpendingAnalysis,
    SpendingTransaction,
)


ResultT = TypeVar("ResultT", bound=BaseModel)

# Spending analysis only looks at the most recent transactions
MAX_ANALYZED_TRANSACTIONS = 20


# =============================================================================
# SYSTEM INSTRUCTIONS
# =============================================================================

ADVISOR_INSTRUCTION = """You are Aetherius, an AI financial advisor specialized in family financial literacy and planning.
You provide practical, actionable advice for Indian families focusing on:
- Budgeting and expense management
- Savings strategies and goal planning
- Investment options suitable for families
- Financial education for different age groups
- Scam protection and financial security
- Insurance and loan guidance

Always provide advice in Indian Rupees (₹) and consider Indian financial products and regulations.
Keep responses conversational, encouraging, and family-focused."""

EDUCATOR_INSTRUCTION = """You are an expert financial education content creator for the Aetherius platform.
Create engaging, age-appropriate financial education content for Indian families.
Focus on practical learning that can be applied immediately.

Age Groups:
- children (5-12): Simple concepts, stories, and games
- teens (13-18): Real-world scenarios, digital money, career planning
- adults (18+): Investment strategies, tax planning, insurance
- all: Content suitable for family learning together

Difficulty Levels:
- beginner: Basic concepts and terminology
- intermediate: Practical applications and strategies
- advanced: Complex planning and optimization

Always use Indian context, currency (₹), and financial products."""

ANALYST_INSTRUCTION = """You are a financial analyst specializing in family spending patterns and budget optimization.
Analyze spending data and provide actionable insights for Indian families.
Focus on practical recommendations that can improve financial health."""

SECURITY_INSTRUCTION = """You are a financial security expert specializing in scam detection for Indian families.
Analyze transaction details to identify potential scams and fraudulent activities.
Consider common Indian scam patterns, UPI frauds, and financial scams."""

PLANNER_INSTRUCTION = """You are a family financial planning expert specializing in goal-based savings for Indian families.
Create realistic, actionable savings plans that consider family dynamics and Indian financial products.
Provide practical strategies that families can implement immediately."""


class AdviceGateway:
    """
    Prompt builder and response parser for all AI features.

    RESPONSIBILITIES:
    - Render only the context fields the caller actually supplied
    - Ask for JSON on structured operations and validate the reply
    - Log every completed and failed call

    BOUNDARIES:
    - NEVER touches the entity store
    - NEVER invents a reply when the provider returns nothing
    """

    def __init__(
        self,
        generator: TextGenerator,
        settings: Optional[GeminiSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._generator = generator
        self._settings = settings or get_settings().gemini
        self._audit = audit_logger or AuditLogger()

    # -------------------------------------------------------------------------
    # Provider calls
    # -------------------------------------------------------------------------

    async def _generate(
        self,
        operation: str,
        prompt: str,
        system_instruction: str,
        model_name: str,
        json_output: bool = False,
    ) -> str:
        try:
            text = await self._generator.generate(
                prompt,
                system_instruction=system_instruction,
                model_name=model_name,
                json_output=json_output,
            )
        except Exception as e:
            await self._audit.log_generation_failed(operation, str(e))
            raise GenerationError(f"Unable to complete {operation}: provider request failed") from e

        if not text or not text.strip():
            await self._audit.log_generation_failed(operation, "Empty response from model")
            raise GenerationError(f"Unable to complete {operation}: empty response from model")

        return text.strip()

    async def _generate_structured(
        self,
        operation: str,
        prompt: str,
        system_instruction: str,
        result_model: type[ResultT],
    ) -> ResultT:
        model_name = self._settings.structured_model_name
        text = await self._generate(
            operation,
            prompt,
            system_instruction,
            model_name,
            json_output=True,
        )

        # Find the JSON object in the response
        start = text.find("{")
        end = text.rfind("}") + 1
        if start < 0 or end <= start:
            await self._audit.log_generation_failed(operation, "Response is not a JSON object")
            raise GenerationError(f"Unable to complete {operation}: response is not JSON")

        try:
            result = result_model.model_validate_json(text[start:end])
        except ValidationError as e:
            await self._audit.log_generation_failed(operation, str(e))
            raise GenerationError(f"Unable to complete {operation}: invalid response structure") from e

        await self._audit.log_generation_completed(operation, model_name)
        return result

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def get_advice(
        self,
        question: str,
        context: Optional[AdviceContext] = None,
    ) -> str:
        """
        Answer a financial question in plain text.

        Only the context fields that are present are added to the prompt.
        """
        model_name = self._settings.advice_model_name
        advice = await self._generate(
            "financial_advice",
            build_advice_prompt(question, context),
            ADVISOR_INSTRUCTION,
            model_name,
        )
        await self._audit.log_generation_completed("financial_advice", model_name)
        return advice

    async def generate_educational_content(
        self,
        topic: str,
        age_group: AgeGroup,
        difficulty: Difficulty,
    ) -> GeneratedLesson:
        prompt = f"""Create educational content about "{topic}" for {age_group.value} at {difficulty.value} level.

Provide a JSON response with:
- title: Catchy, educational title
- description: 2-3 sentence summary
- content: Detailed lesson content (500-800 words)
- duration: Estimated reading time in minutes

Make it engaging, practical, and actionable for Indian families."""

        return await self._generate_structured(
            "educational_content",
            prompt,
            EDUCATOR_INSTRUCTION,
            GeneratedLesson,
        )

    async def analyze_spending(
        self,
        transactions: list[SpendingTransaction],
        budget_limits: dict[str, Decimal],
    ) -> SpendingAnalysis:
        """
        Analyze a family's spending against its budget limits.

        At most the 20 most recent transactions are sent.
        """
        recent = sorted(transactions, key=lambda t: _as_utc(t.date), reverse=True)
        recent = recent[:MAX_ANALYZED_TRANSACTIONS]

        transactions_json = json.dumps(
            [t.model_dump(mode="json", by_alias=True) for t in recent]
        )
        limits_json = json.dumps({name: str(limit) for name, limit in budget_limits.items()})

        prompt = f"""Analyze this family's spending pattern:

Transactions (most recent first): {transactions_json}
Budget Limits: {limits_json}

Provide analysis in JSON format:
- insights: Array of 3-5 key observations about spending patterns
- recommendations: Array of 3-5 specific, actionable recommendations
- riskLevel: "low", "medium", or "high" based on overspending risk

Focus on Indian family financial context and provide practical advice."""

        return await self._generate_structured(
            "spending_analysis",
            prompt,
            ANALYST_INSTRUCTION,
            SpendingAnalysis,
        )

    async def detect_scam(self, details: ScamCheckRequest) -> ScamAssessment:
        prompt = f"""Analyze this transaction for potential scam indicators:

Transaction Details:
- Amount: ₹{details.amount}
- Description: {details.description}
- Recipient: {details.recipient}
- Method: {details.method}
- Time: {details.timestamp}

Provide analysis in JSON format:
- isScamLikely: Boolean indicating if this appears to be a scam
- confidence: Number 0-100 indicating confidence level
- reasons: Array of specific reasons why this might be a scam
- recommendations: Array of actions the user should take

Focus on Indian scam patterns and provide practical safety advice."""

        return await self._generate_structured(
            "scam_check",
            prompt,
            SECURITY_INSTRUCTION,
            ScamAssessment,
        )

    async def plan_goal(
        self,
        goal: GoalSummary,
        family_finances: FamilyFinances,
    ) -> GoalPlan:
        prompt = f"""Create a savings plan for this family goal:

Goal Details:
- Name: {goal.name}
- Target Amount: ₹{goal.target_amount}
- Timeframe: {goal.timeframe}
- Priority: {goal.priority}

Family Finances:
- Monthly Income: ₹{family_finances.monthly_income}
- Monthly Expenses: ₹{family_finances.monthly_expenses}
- Current Savings: ₹{family_finances.current_savings}
- Family Members: {family_finances.member_count}

Provide a JSON response with:
- monthlyContribution: Required monthly savings amount
- strategies: Array of specific saving strategies
- timeline: Realistic timeline description
- feasibilityScore: Score 1-100 indicating how achievable this goal is
- recommendations: Array of actionable recommendations

Consider Indian investment options like SIPs, FDs, PPF, etc."""

        return await self._generate_structured(
            "goal_plan",
            prompt,
            PLANNER_INSTRUCTION,
            GoalPlan,
        )


def build_advice_prompt(question: str, context: Optional[AdviceContext] = None) -> str:
    """Prefix the question with whatever family context was supplied."""
    if context is None:
        return question

    lines = []
    if context.current_goals:
        lines.append(f"- Current Goals: {', '.join(context.current_goals)}")
    if context.budget_usage is not None:
        lines.append(f"- Current Budget Usage: {context.budget_usage:g}%")
    if context.total_balance:
        lines.append(f"- Family Balance: ₹{context.total_balance}")
    if context.member_count is not None:
        lines.append(f"- Family Members: {context.member_count}")

    if not lines:
        return question

    return "Family Context:\n" + "\n".join(lines) + f"\n\nQuestion: {question}"


def _as_utc(moment: datetime) -> datetime:
    """Make naive and aware timestamps comparable."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class GenerationError(Exception):
    """The text-generation service failed or returned an unusable reply."""
    pass
