"""
Smart Alert Models

Alerts are notifications surfaced to the family about budget,
security or progress events.

DESIGN DECISION: The `data` payload is typed per alert type.
An overspending alert always carries {category, percentage};
a scam alert always carries {amount}. The payload is validated
against the model registered for the alert's `type`.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import Field, model_validator

from aetherius.models.common import CamelModel, Money, coerce_variant, new_id, utcnow


class AlertType(str, Enum):
    OVERSPENDING = "overspending"
    SCAM = "scam"
    ACHIEVEMENT = "achievement"
    GOAL_PROGRESS = "goal_progress"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# PER-TYPE PAYLOADS
# =============================================================================

class OverspendingAlertData(CamelModel):
    category: str
    percentage: int = Field(..., ge=0)


class ScamAlertData(CamelModel):
    amount: Money


class AchievementAlertData(CamelModel):
    amount: Money


class GoalProgressAlertData(CamelModel):
    goal_id: Optional[str] = None
    percentage: int = Field(..., ge=0)


AlertData = Union[
    OverspendingAlertData,
    ScamAlertData,
    AchievementAlertData,
    GoalProgressAlertData,
]

ALERT_DATA_MODELS: dict[AlertType, type[CamelModel]] = {
    AlertType.OVERSPENDING: OverspendingAlertData,
    AlertType.SCAM: ScamAlertData,
    AlertType.ACHIEVEMENT: AchievementAlertData,
    AlertType.GOAL_PROGRESS: GoalProgressAlertData,
}


# =============================================================================
# ALERTS
# =============================================================================

class SmartAlertFields(CamelModel):
    type: AlertType
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)
    severity: AlertSeverity
    is_read: bool = False
    data: Optional[AlertData] = None

    @model_validator(mode="before")
    @classmethod
    def select_data_model(cls, values: Any) -> Any:
        """Parse a raw `data` dict with the payload model for `type`."""
        return coerce_variant(values, "type", "data", ALERT_DATA_MODELS)

    @model_validator(mode="after")
    def check_data_matches_type(self) -> "SmartAlertFields":
        if self.data is not None:
            expected = ALERT_DATA_MODELS[self.type]
            if not isinstance(self.data, expected):
                raise ValueError(
                    f"{self.type.value} alerts carry {expected.__name__} data"
                )
        return self


class SmartAlertCreate(SmartAlertFields):
    family_id: str = Field(..., min_length=1)


class SmartAlert(SmartAlertCreate):
    """
    A stored alert.

    `is_read` only ever moves from False to True.
    """

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utcnow)
