"""Alert rules package."""

from aetherius.alerts.evaluator import (
    AlertRuleEvaluator,
    evaluate_expense,
    spend_percentage,
)

__all__ = [
    "AlertRuleEvaluator",
    "evaluate_expense",
    "spend_percentage",
]
