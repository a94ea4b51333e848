"""
Investment and Financial Service Models

Investments are a global catalog of products the dashboard suggests.
Financial services (insurance, loans, credit score) belong to a family;
their `details` payload is typed per service type.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import Field, model_validator

from aetherius.models.common import CamelModel, Money, NonNegativeMoney, coerce_variant, new_id


class InvestmentType(str, Enum):
    SIP = "sip"
    FD = "fd"
    GOLD = "gold"
    STOCKS = "stocks"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FinancialServiceType(str, Enum):
    INSURANCE = "insurance"
    LOAN = "loan"
    CREDIT_SCORE = "credit_score"


class ServiceStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    COMPLETED = "completed"


# Annual return in percent, e.g. 12.80
ReturnRate = Annotated[Decimal, Field(max_digits=5, decimal_places=2)]


# =============================================================================
# INVESTMENTS
# =============================================================================

class InvestmentCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    type: InvestmentType
    returns: Optional[ReturnRate] = None
    risk: Optional[RiskLevel] = None
    description: Optional[str] = Field(default=None, max_length=500)
    min_investment: Optional[NonNegativeMoney] = None


class Investment(InvestmentCreate):
    id: str = Field(default_factory=new_id)


# =============================================================================
# FINANCIAL SERVICES
# =============================================================================

class InsuranceDetails(CamelModel):
    policies: int = Field(..., ge=0)
    coverage: str


class LoanDetails(CamelModel):
    remaining: str
    tenure: str


class CreditScoreDetails(CamelModel):
    rating: str
    last_updated: Optional[str] = None


ServiceDetails = Union[InsuranceDetails, LoanDetails, CreditScoreDetails]

SERVICE_DETAIL_MODELS: dict[FinancialServiceType, type[CamelModel]] = {
    FinancialServiceType.INSURANCE: InsuranceDetails,
    FinancialServiceType.LOAN: LoanDetails,
    FinancialServiceType.CREDIT_SCORE: CreditScoreDetails,
}


class FinancialServiceFields(CamelModel):
    type: FinancialServiceType
    name: str = Field(..., min_length=1, max_length=200)
    status: Optional[ServiceStatus] = None
    amount: Optional[Money] = Field(
        default=None,
        description="Cover, principal, or the score itself for credit_score"
    )
    monthly_payment: Optional[NonNegativeMoney] = None
    details: Optional[ServiceDetails] = None

    @model_validator(mode="before")
    @classmethod
    def select_details_model(cls, values: Any) -> Any:
        """Parse a raw `details` dict with the model for `type`."""
        return coerce_variant(values, "type", "details", SERVICE_DETAIL_MODELS)

    @model_validator(mode="after")
    def check_details_match_type(self) -> "FinancialServiceFields":
        if self.details is not None:
            expected = SERVICE_DETAIL_MODELS[self.type]
            if not isinstance(self.details, expected):
                raise ValueError(
                    f"{self.type.value} services carry {expected.__name__} details"
                )
        return self


class FinancialServiceCreate(FinancialServiceFields):
    family_id: str = Field(..., min_length=1)


class FinancialService(FinancialServiceCreate):
    id: str = Field(default_factory=new_id)
