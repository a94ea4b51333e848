"""
Alert Rule Evaluator

Raises an overspending alert when an expense pushes a budget category
past the threshold.

RULE:
- percentage = (category spent + expense amount) / category budget * 100
- percentage > threshold (90)  -> alert, severity "medium"
- percentage > 100             -> alert, severity "high"

The evaluator reads the stored `spent` but never writes the budget.
Spend is recorded separately through the budget spend operation.

IMPORTANT: A missing budget, an unknown category or a category with a
zero budget is not an error. The evaluator simply does nothing.
"""

import asyncio
import weakref
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from aetherius.audit import AuditLogger
from aetherius.models import (
    AlertSeverity,
    AlertType,
    Budget,
    OverspendingAlertData,
    SmartAlert,
    SmartAlertCreate,
    Transaction,
    TransactionType,
    month_key,
)
from aetherius.models.common import round_half_up
from aetherius.services.storage import EntityStoreInterface


DEFAULT_THRESHOLD = 90
HIGH_SEVERITY_ABOVE = 100


def spend_percentage(spent: Decimal, budget: Decimal) -> Decimal:
    """Spent as a percentage of budget. The budget must be non-zero."""
    return spent / budget * 100


def evaluate_expense(
    budget: Budget,
    category: str,
    amount: Decimal,
    threshold: int = DEFAULT_THRESHOLD,
) -> Optional[SmartAlertCreate]:
    """
    Decide whether an expense should raise an overspending alert.

    Pure function: nothing is read from or written to a store.

    Args:
        budget: The family's budget for the expense's month
        category: Transaction category (matched case-insensitively)
        amount: Expense amount
        threshold: Percentage that must be exceeded

    Returns:
        The alert to create, or None
    """
    bucket = budget.categories.get(category)
    if bucket is None or not bucket.budget:
        return None

    percentage = spend_percentage(bucket.spent + amount, bucket.budget)
    if percentage <= threshold:
        return None

    severity = (
        AlertSeverity.HIGH if percentage > HIGH_SEVERITY_ABOVE
        else AlertSeverity.MEDIUM
    )
    name = category.strip().lower()
    shown = percentage.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    return SmartAlertCreate(
        family_id=budget.family_id,
        type=AlertType.OVERSPENDING,
        title=f"{name.capitalize()} Budget Alert",
        message=f"You've spent {shown}% of your {name} budget",
        severity=severity,
        data=OverspendingAlertData(
            category=name,
            percentage=round_half_up(percentage),
        ),
    )


class AlertRuleEvaluator:
    """
    Runs the overspending rule after each expense is stored.

    Reads of a category's spend and the writes that depend on them are
    serialized per (family, month, category) within this process.
    """

    def __init__(
        self,
        store: EntityStoreInterface,
        threshold: int = DEFAULT_THRESHOLD,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._threshold = threshold
        self._audit = audit_logger or AuditLogger()
        self._locks: "weakref.WeakValueDictionary[tuple[str, str, str], asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def lock_count(self) -> int:
        """Number of category locks currently alive."""
        return len(self._locks)

    def category_lock(self, family_id: str, month: str, category: str) -> asyncio.Lock:
        """
        The lock guarding one budget category of one family's month.

        Locks are held weakly: an entry lives only while some caller holds
        or waits on it.
        """
        key = (family_id, month, category.strip().lower())
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def on_transaction(self, transaction: Transaction) -> Optional[SmartAlert]:
        """
        Evaluate a stored transaction.

        Returns:
            The created alert, or None when the rule did not fire
        """
        if transaction.type != TransactionType.EXPENSE:
            return None

        month = month_key(transaction.date)
        async with self.category_lock(transaction.family_id, month, transaction.category):
            budget = await self._store.get_family_budget(transaction.family_id, month)
            if budget is None:
                return None

            proposal = evaluate_expense(
                budget,
                transaction.category,
                transaction.amount,
                self._threshold,
            )
            if proposal is None:
                return None

            alert = await self._store.create_alert(proposal)

        await self._audit.log_alert_raised(alert)
        return alert
