"""Family, member and goal routes."""

from fastapi import APIRouter, HTTPException, status

from aetherius.api.dependencies import StoreDependency
from aetherius.models import (
    Family,
    FamilyCreate,
    FamilyGoal,
    FamilyGoalCreate,
    FamilyGoalFields,
    FamilyGoalUpdate,
    FamilyMember,
    FamilyMemberCreate,
    FamilyMemberFields,
    FamilyMemberUpdate,
    FamilyWithMembers,
)


router = APIRouter(tags=["Family"])


# =============================================================================
# FAMILIES
# =============================================================================

@router.get("/family/{family_id}", response_model=FamilyWithMembers)
async def get_family(family_id: str, store: StoreDependency):
    """Family snapshot with its active members."""
    family_data = await store.get_family_with_members(family_id)
    if family_data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Family not found")
    return family_data


@router.post("/family", response_model=Family, status_code=status.HTTP_201_CREATED)
async def create_family(family: FamilyCreate, store: StoreDependency):
    return await store.create_family(family)


# =============================================================================
# MEMBERS
# =============================================================================

@router.get("/family/{family_id}/members", response_model=list[FamilyMember])
async def list_members(family_id: str, store: StoreDependency):
    return await store.list_family_members(family_id)


@router.post(
    "/family/{family_id}/members",
    response_model=FamilyMember,
    status_code=status.HTTP_201_CREATED,
)
async def create_member(family_id: str, member: FamilyMemberFields, store: StoreDependency):
    return await store.create_family_member(
        FamilyMemberCreate(family_id=family_id, **member.model_dump())
    )


@router.patch("/members/{member_id}", response_model=FamilyMember)
async def update_member(member_id: str, updates: FamilyMemberUpdate, store: StoreDependency):
    """Partial update. Sending isActive=false removes the member from listings."""
    member = await store.update_family_member(member_id, updates)
    if member is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    return member


# =============================================================================
# GOALS
# =============================================================================

@router.get("/family/{family_id}/goals", response_model=list[FamilyGoal])
async def list_goals(family_id: str, store: StoreDependency):
    return await store.list_family_goals(family_id)


@router.post(
    "/family/{family_id}/goals",
    response_model=FamilyGoal,
    status_code=status.HTTP_201_CREATED,
)
async def create_goal(family_id: str, goal: FamilyGoalFields, store: StoreDependency):
    return await store.create_family_goal(
        FamilyGoalCreate(family_id=family_id, **goal.model_dump())
    )


@router.get("/goals/{goal_id}", response_model=FamilyGoal)
async def get_goal(goal_id: str, store: StoreDependency):
    goal = await store.get_family_goal(goal_id)
    if goal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return goal


@router.patch("/goals/{goal_id}", response_model=FamilyGoal)
async def update_goal(goal_id: str, updates: FamilyGoalUpdate, store: StoreDependency):
    goal = await store.update_family_goal(goal_id, updates)
    if goal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return goal
