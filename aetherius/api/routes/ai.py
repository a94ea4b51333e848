"""
AI routes.

Thin HTTP layer over the advice gateway. A GenerationError raised
anywhere below becomes a 500 through the registered exception handler.
Only lesson generation writes to the store.
"""

from fastapi import APIRouter, status

from aetherius.api.dependencies import ComponentsDependency
from aetherius.models import (
    AdviceRequest,
    AdviceResponse,
    ContentGenerationRequest,
    EducationalContent,
    GoalPlan,
    GoalPlanRequest,
    ScamAssessment,
    ScamCheckRequest,
    SpendingAnalysis,
    SpendingAnalysisRequest,
)


router = APIRouter(prefix="/ai", tags=["AI"])


@router.post("/financial-advice", response_model=AdviceResponse)
async def financial_advice(request: AdviceRequest, components: ComponentsDependency):
    advice = await components.gateway.get_advice(request.question, request.context)
    return AdviceResponse(advice=advice)


@router.post(
    "/educational-content",
    response_model=EducationalContent,
    status_code=status.HTTP_201_CREATED,
)
async def generate_educational_content(
    request: ContentGenerationRequest,
    components: ComponentsDependency,
):
    """Generate a lesson and add it to the catalog."""
    return await components.learning.generate_lesson(request)


@router.post("/spending-analysis", response_model=SpendingAnalysis)
async def spending_analysis(request: SpendingAnalysisRequest, components: ComponentsDependency):
    return await components.gateway.analyze_spending(request.transactions, request.budget_limits)


@router.post("/scam-check", response_model=ScamAssessment)
async def scam_check(request: ScamCheckRequest, components: ComponentsDependency):
    return await components.gateway.detect_scam(request)


@router.post("/goal-plan", response_model=GoalPlan)
async def goal_plan(request: GoalPlanRequest, components: ComponentsDependency):
    return await components.gateway.plan_goal(request.goal, request.family_finances)
