"""Transaction and alert routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from aetherius.api.dependencies import ComponentsDependency, StoreDependency
from aetherius.models import SmartAlert, Transaction, TransactionFields


router = APIRouter(tags=["Transactions"])


@router.get("/family/{family_id}/transactions", response_model=list[Transaction])
async def list_transactions(
    family_id: str,
    components: ComponentsDependency,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
):
    """Newest first. Without a limit the configured default (50) applies."""
    if limit is None:
        limit = components.settings.app.default_transaction_limit
    return await components.store.list_family_transactions(family_id, limit)


@router.post(
    "/family/{family_id}/transactions",
    response_model=Transaction,
    status_code=status.HTTP_201_CREATED,
)
async def create_transaction(
    family_id: str,
    transaction: TransactionFields,
    components: ComponentsDependency,
):
    """
    Record a transaction.

    An expense that pushes its budget category past the threshold also
    creates an overspending alert, visible through the alerts listing.
    """
    stored, _alert = await components.transactions.record(family_id, transaction)
    return stored


@router.get("/family/{family_id}/alerts", response_model=list[SmartAlert], tags=["Alerts"])
async def list_alerts(family_id: str, store: StoreDependency):
    return await store.list_family_alerts(family_id)


@router.patch("/alerts/{alert_id}/read", response_model=SmartAlert, tags=["Alerts"])
async def mark_alert_read(alert_id: str, components: ComponentsDependency):
    alert = await components.alerts.mark_read(alert_id)
    if alert is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alert not found")
    return alert
