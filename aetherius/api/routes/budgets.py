"""Budget routes."""

from fastapi import APIRouter, HTTPException, Path, status

from aetherius.api.dependencies import ComponentsDependency, StoreDependency
from aetherius.models import Budget, BudgetCreate, BudgetFields, BudgetSpend, BudgetUpdate
from aetherius.models.family import MONTH_PATTERN


router = APIRouter(tags=["Budgets"])


@router.get("/family/{family_id}/budget/{month}", response_model=Budget)
async def get_budget(
    family_id: str,
    store: StoreDependency,
    month: str = Path(..., pattern=MONTH_PATTERN, description="Budget month as YYYY-MM"),
):
    budget = await store.get_family_budget(family_id, month)
    if budget is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    return budget


@router.post(
    "/family/{family_id}/budget",
    response_model=Budget,
    status_code=status.HTTP_201_CREATED,
)
async def create_budget(family_id: str, budget: BudgetFields, store: StoreDependency):
    return await store.create_budget(BudgetCreate(family_id=family_id, **budget.model_dump()))


@router.patch("/budgets/{budget_id}", response_model=Budget)
async def update_budget(budget_id: str, updates: BudgetUpdate, components: ComponentsDependency):
    """Change limits. Spend only moves through the spend route."""
    budget = await components.budgets.update_limits(budget_id, updates)
    if budget is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    return budget


@router.post("/budgets/{budget_id}/spend", response_model=Budget)
async def record_spend(budget_id: str, spend: BudgetSpend, components: ComponentsDependency):
    """Add an amount to one category's spend and to the budget total."""
    budget = await components.budgets.record_spend(budget_id, spend)
    if budget is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    return budget
