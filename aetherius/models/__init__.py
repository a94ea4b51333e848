"""
Data Models Package

This package contains all Pydantic models used in Aetherius.
All data flowing through the system must conform to these schemas.
"""

from aetherius.models.advice import (
    AdviceContext,
    AdviceRequest,
    AdviceResponse,
    ContentGenerationRequest,
    FamilyFinances,
    GeneratedLesson,
    GoalPlan,
    GoalPlanRequest,
    GoalSummary,
    ScamAssessment,
    ScamCheckRequest,
    SpendingAnalysis,
    SpendingAnalysisRequest,
    SpendingTransaction,
)
from aetherius.models.alert import (
    AchievementAlertData,
    AlertSeverity,
    AlertType,
    GoalProgressAlertData,
    OverspendingAlertData,
    ScamAlertData,
    SmartAlert,
    SmartAlertCreate,
)
from aetherius.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from aetherius.models.catalog import (
    CreditScoreDetails,
    FinancialService,
    FinancialServiceCreate,
    FinancialServiceFields,
    FinancialServiceType,
    InsuranceDetails,
    Investment,
    InvestmentCreate,
    InvestmentType,
    LoanDetails,
    RiskLevel,
    ServiceStatus,
)
from aetherius.models.education import (
    AgeGroup,
    ContentType,
    Difficulty,
    EducationalContent,
    EducationalContentCreate,
    LearningProgress,
    LearningProgressFields,
    LearningProgressUpsert,
)
from aetherius.models.family import (
    Budget,
    BudgetCategories,
    BudgetCategoriesUpdate,
    BudgetCategory,
    BudgetCreate,
    BudgetFields,
    BudgetSpend,
    BudgetUpdate,
    CategoryBudget,
    CategoryLimitUpdate,
    Family,
    FamilyCreate,
    FamilyGoal,
    FamilyGoalCreate,
    FamilyGoalFields,
    FamilyGoalUpdate,
    FamilyMember,
    FamilyMemberCreate,
    FamilyMemberFields,
    FamilyMemberUpdate,
    FamilyWithMembers,
    Transaction,
    TransactionCreate,
    TransactionFields,
    TransactionType,
    month_key,
)

__all__ = [
    # Family models
    "Budget",
    "BudgetCategories",
    "BudgetCategoriesUpdate",
    "BudgetCategory",
    "BudgetCreate",
    "BudgetFields",
    "BudgetSpend",
    "BudgetUpdate",
    "CategoryBudget",
    "CategoryLimitUpdate",
    "Family",
    "FamilyCreate",
    "FamilyGoal",
    "FamilyGoalCreate",
    "FamilyGoalFields",
    "FamilyGoalUpdate",
    "FamilyMember",
    "FamilyMemberCreate",
    "FamilyMemberFields",
    "FamilyMemberUpdate",
    "FamilyWithMembers",
    "Transaction",
    "TransactionCreate",
    "TransactionFields",
    "TransactionType",
    "month_key",
    # Alert models
    "AchievementAlertData",
    "AlertSeverity",
    "AlertType",
    "GoalProgressAlertData",
    "OverspendingAlertData",
    "ScamAlertData",
    "SmartAlert",
    "SmartAlertCreate",
    # Learning models
    "AgeGroup",
    "ContentType",
    "Difficulty",
    "EducationalContent",
    "EducationalContentCreate",
    "LearningProgress",
    "LearningProgressFields",
    "LearningProgressUpsert",
    # Catalog models
    "CreditScoreDetails",
    "FinancialService",
    "FinancialServiceCreate",
    "FinancialServiceFields",
    "FinancialServiceType",
    "InsuranceDetails",
    "Investment",
    "InvestmentCreate",
    "InvestmentType",
    "LoanDetails",
    "RiskLevel",
    "ServiceStatus",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Advice models
    "AdviceContext",
    "AdviceRequest",
    "AdviceResponse",
    "ContentGenerationRequest",
    "FamilyFinances",
    "GeneratedLesson",
    "GoalPlan",
    "GoalPlanRequest",
    "GoalSummary",
    "ScamAssessment",
    "ScamCheckRequest",
    "SpendingAnalysis",
    "SpendingAnalysisRequest",
    "SpendingTransaction",
]
