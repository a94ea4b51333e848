"""Investment and financial service routes."""

from fastapi import APIRouter, status

from aetherius.api.dependencies import StoreDependency
from aetherius.models import (
    FinancialService,
    FinancialServiceCreate,
    FinancialServiceFields,
    Investment,
    InvestmentCreate,
)


router = APIRouter(tags=["Catalog"])


@router.get("/investments", response_model=list[Investment])
async def list_investments(store: StoreDependency):
    return await store.list_investments()


@router.post("/investments", response_model=Investment, status_code=status.HTTP_201_CREATED)
async def create_investment(investment: InvestmentCreate, store: StoreDependency):
    return await store.create_investment(investment)


@router.get("/family/{family_id}/financial-services", response_model=list[FinancialService])
async def list_financial_services(family_id: str, store: StoreDependency):
    return await store.list_family_financial_services(family_id)


@router.post(
    "/family/{family_id}/financial-services",
    response_model=FinancialService,
    status_code=status.HTTP_201_CREATED,
)
async def create_financial_service(
    family_id: str,
    service: FinancialServiceFields,
    store: StoreDependency,
):
    return await store.create_financial_service(
        FinancialServiceCreate(family_id=family_id, **service.model_dump())
    )
