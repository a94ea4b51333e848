"""
Learning Models

Educational content is a global catalog shared by all families.
Learning progress tracks one member's progress through one item.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from aetherius.models.common import CamelModel, new_id, utcnow


class ContentType(str, Enum):
    LESSON = "lesson"
    GAME = "game"
    QUIZ = "quiz"


class AgeGroup(str, Enum):
    """
    Audience of a content item.

    ALL marks family content: it matches every age-group filter.
    """
    CHILDREN = "children"
    TEENS = "teens"
    ADULTS = "adults"
    ALL = "all"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class EducationalContentCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = Field(default=None, max_length=2000)
    content: str = Field(..., min_length=1)
    type: ContentType
    category: Optional[str] = Field(
        default=None,
        max_length=100,
        description="investing, budgeting, saving, ..."
    )
    age_group: Optional[AgeGroup] = None
    duration: Optional[int] = Field(
        default=None,
        ge=0,
        description="Estimated time in minutes"
    )
    difficulty: Optional[Difficulty] = None
    icon: Optional[str] = Field(default=None, max_length=50)
    is_ai_generated: bool = Field(default=False, alias="isAIGenerated")


class EducationalContent(EducationalContentCreate):
    id: str = Field(default_factory=new_id)

    def matches(
        self,
        content_type: Optional[ContentType] = None,
        age_group: Optional[AgeGroup] = None,
    ) -> bool:
        """Check the item against optional catalog filters."""
        if content_type is not None and self.type != content_type:
            return False
        if age_group is not None and self.age_group not in (age_group, AgeGroup.ALL):
            return False
        return True


class LearningProgressFields(CamelModel):
    content_id: str = Field(..., min_length=1)
    progress: int = Field(default=0, ge=0, le=100, description="Percent complete")
    completed: bool = False


class LearningProgressUpsert(LearningProgressFields):
    """Write keyed by (member_id, content_id)."""

    member_id: str = Field(..., min_length=1)


class LearningProgress(LearningProgressUpsert):
    id: str = Field(default_factory=new_id)
    last_accessed: datetime = Field(default_factory=utcnow)
