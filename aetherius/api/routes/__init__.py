"""API routers, one per area of the dashboard."""

from aetherius.api.routes import ai, budgets, catalog, education, family, transactions

ROUTERS = [
    family.router,
    budgets.router,
    transactions.router,
    education.router,
    catalog.router,
    ai.router,
]

__all__ = ["ROUTERS"]
