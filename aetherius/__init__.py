"""
Aetherius - Family Finance Backend

REST API for a family finance dashboard: budgets, goals, transactions,
smart alerts, learning content and AI-generated financial guidance.

DESIGN PRINCIPLES:
1. Storage layer is swappable (relational or in-memory)
2. Budget totals change only through an explicit operation
3. AI output is validated before it is trusted or persisted
4. Every handler fails with a plain {message} body
"""

__version__ = "1.0.0"
__author__ = "Aetherius Team"
