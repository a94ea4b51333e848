"""Learning catalog and progress routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from aetherius.api.dependencies import StoreDependency
from aetherius.models import (
    AgeGroup,
    ContentType,
    EducationalContent,
    LearningProgress,
    LearningProgressFields,
    LearningProgressUpsert,
)


router = APIRouter(tags=["Learning"])


@router.get("/educational-content", response_model=list[EducationalContent])
async def list_educational_content(
    store: StoreDependency,
    content_type: Optional[ContentType] = Query(default=None, alias="type"),
    age_group: Optional[AgeGroup] = Query(default=None, alias="ageGroup"),
):
    """Catalog items, optionally filtered. Items for "all" ages match any ageGroup."""
    return await store.list_educational_content(content_type, age_group)


@router.get("/educational-content/{content_id}", response_model=EducationalContent)
async def get_educational_content(content_id: str, store: StoreDependency):
    content = await store.get_educational_content(content_id)
    if content is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Educational content not found")
    return content


@router.get("/members/{member_id}/learning-progress", response_model=list[LearningProgress])
async def list_learning_progress(member_id: str, store: StoreDependency):
    return await store.list_learning_progress(member_id)


@router.post("/members/{member_id}/learning-progress", response_model=LearningProgress)
async def upsert_learning_progress(
    member_id: str,
    progress: LearningProgressFields,
    store: StoreDependency,
):
    """Create or update the member's progress on one content item."""
    return await store.upsert_learning_progress(
        LearningProgressUpsert(member_id=member_id, **progress.model_dump())
    )
