"""
Demo Data Seeder

Loads the "Johnson Family" demo household into an empty store so the
dashboard has something to show on first start. Enabled with
SEED_DEMO_DATA=true.

Ids are fixed ("family-1", "member-1", ...) so a client can open the
demo family without looking it up first. The budget is created for the
current month.
"""

from datetime import datetime
from decimal import Decimal

from aetherius.models import (
    AchievementAlertData,
    AgeGroup,
    AlertSeverity,
    AlertType,
    Budget,
    BudgetCategories,
    CategoryBudget,
    ContentType,
    CreditScoreDetails,
    Difficulty,
    EducationalContent,
    Family,
    FamilyGoal,
    FamilyMember,
    FinancialService,
    FinancialServiceType,
    InsuranceDetails,
    Investment,
    InvestmentType,
    LoanDetails,
    OverspendingAlertData,
    RiskLevel,
    ScamAlertData,
    ServiceStatus,
    SmartAlert,
    month_key,
)
from aetherius.models.common import utcnow
from aetherius.services.storage import EntityStoreInterface


DEMO_FAMILY_ID = "family-1"


def _category(budget: str, spent: str) -> CategoryBudget:
    return CategoryBudget(budget=Decimal(budget), spent=Decimal(spent))


def build_demo_family() -> dict[str, list]:
    """Build the demo entities, grouped by kind."""
    family_id = DEMO_FAMILY_ID

    family = Family(
        id=family_id,
        name="The Johnson Family",
        total_balance=Decimal("245670"),
    )

    members = [
        FamilyMember(
            id="member-1", family_id=family_id, name="Dad", role="Family Head",
            age=42, balance=Decimal("85430"), avatar="dad", status="+₹2,500",
        ),
        FamilyMember(
            id="member-2", family_id=family_id, name="Mom", role="Co-Manager",
            age=38, balance=Decimal("67240"), avatar="mom", status="Saving Goal",
        ),
        FamilyMember(
            id="member-3", family_id=family_id, name="Alex", role="Student",
            age=16, balance=Decimal("8500"), avatar="alex", status="Learning",
        ),
        FamilyMember(
            id="member-4", family_id=family_id, name="Emma", role="Junior Saver",
            age=12, balance=Decimal("3200"), avatar="emma", status="Top Saver",
        ),
    ]

    goals = [
        FamilyGoal(
            id="goal-1",
            family_id=family_id,
            name="Family Vacation to Goa",
            description="Summer vacation for the whole family",
            target_amount=Decimal("75000"),
            current_amount=Decimal("45000"),
            deadline=datetime(2025, 6, 1),
            category="vacation",
            icon="plane",
            contributors=["member-1", "member-2", "member-3", "member-4"],
        ),
        FamilyGoal(
            id="goal-2",
            family_id=family_id,
            name="Emergency Fund",
            description="6 months of expenses",
            target_amount=Decimal("100000"),
            current_amount=Decimal("85000"),
            deadline=datetime(2025, 12, 31),
            category="emergency",
            icon="shield-alt",
            contributors=["member-1", "member-2"],
        ),
        FamilyGoal(
            id="goal-3",
            family_id=family_id,
            name="Children's Education Fund",
            description="Long-term education savings",
            target_amount=Decimal("500000"),
            current_amount=Decimal("125000"),
            deadline=datetime(2030, 12, 31),
            category="education",
            icon="graduation-cap",
            contributors=["member-1", "member-2"],
        ),
    ]

    budgets = [
        Budget(
            id="budget-1",
            family_id=family_id,
            month=month_key(utcnow()),
            total_budget=Decimal("95000"),
            total_spent=Decimal("78450"),
            categories=BudgetCategories(
                food=_category("25000", "22340"),
                transport=_category("20000", "18700"),
                entertainment=_category("15000", "12450"),
                shopping=_category("27000", "24960"),
                utilities=_category("8000", "0"),
                healthcare=_category("0", "0"),
            ),
        ),
    ]

    alerts = [
        SmartAlert(
            id="alert-1",
            family_id=family_id,
            type=AlertType.OVERSPENDING,
            title="Shopping Budget Alert",
            message="You've spent 92% of your shopping budget (₹24,960/₹27,000)",
            severity=AlertSeverity.HIGH,
            data=OverspendingAlertData(category="shopping", percentage=92),
        ),
        SmartAlert(
            id="alert-2",
            family_id=family_id,
            type=AlertType.SCAM,
            title="Scam Alert Blocked",
            message="Suspicious transaction attempt blocked for ₹15,000",
            severity=AlertSeverity.HIGH,
            data=ScamAlertData(amount=Decimal("15000")),
        ),
        SmartAlert(
            id="alert-3",
            family_id=family_id,
            type=AlertType.ACHIEVEMENT,
            title="Great Job!",
            message="You're ahead of your savings goal by ₹3,200 this month",
            severity=AlertSeverity.LOW,
            data=AchievementAlertData(amount=Decimal("3200")),
        ),
    ]

    content = [
        EducationalContent(
            id="content-1",
            title="Smart Investment Strategies for Families",
            description="Learn how to diversify your family's investment portfolio with our AI-guided course.",
            content="Comprehensive guide to family investing...",
            type=ContentType.LESSON,
            category="investing",
            age_group=AgeGroup.ADULTS,
            duration=15,
            difficulty=Difficulty.INTERMEDIATE,
            icon="brain",
            is_ai_generated=True,
        ),
        EducationalContent(
            id="content-2",
            title="Budget Challenge Week",
            description="Compete with your family members to see who can stick to their budget best!",
            content="Interactive budget challenge game...",
            type=ContentType.GAME,
            category="budgeting",
            age_group=AgeGroup.ALL,
            duration=30,
            difficulty=Difficulty.BEGINNER,
            icon="puzzle-piece",
            is_ai_generated=False,
        ),
    ]

    investments = [
        Investment(
            id="inv-1",
            name="Diversified Equity Fund",
            type=InvestmentType.SIP,
            returns=Decimal("12.8"),
            risk=RiskLevel.MEDIUM,
            description="Start with ₹1,000/month for long-term wealth building",
            min_investment=Decimal("1000"),
        ),
        Investment(
            id="inv-2",
            name="Fixed Deposit",
            type=InvestmentType.FD,
            returns=Decimal("7.2"),
            risk=RiskLevel.LOW,
            description="Minimum ₹5,000 • 1-5 years tenure",
            min_investment=Decimal("5000"),
        ),
        Investment(
            id="inv-3",
            name="Digital Gold",
            type=InvestmentType.GOLD,
            returns=Decimal("8.5"),
            risk=RiskLevel.MEDIUM,
            description="Hedge against inflation • Easy to buy/sell",
            min_investment=Decimal("100"),
        ),
    ]

    services = [
        FinancialService(
            id="service-1",
            family_id=family_id,
            type=FinancialServiceType.INSURANCE,
            name="Life Insurance",
            status=ServiceStatus.ACTIVE,
            amount=Decimal("1000000"),
            monthly_payment=Decimal("2500"),
            details=InsuranceDetails(policies=3, coverage="Life, Health, Term"),
        ),
        FinancialService(
            id="service-2",
            family_id=family_id,
            type=FinancialServiceType.LOAN,
            name="Home Loan",
            status=ServiceStatus.ACTIVE,
            amount=Decimal("2500000"),
            monthly_payment=Decimal("28450"),
            details=LoanDetails(remaining="18,50,000", tenure="15 years"),
        ),
        FinancialService(
            id="service-3",
            family_id=family_id,
            type=FinancialServiceType.CREDIT_SCORE,
            name="Credit Score",
            status=ServiceStatus.ACTIVE,
            amount=Decimal("785"),
            monthly_payment=Decimal("0"),
            details=CreditScoreDetails(rating="Excellent", last_updated="Nov 15"),
        ),
    ]

    return {
        "families": [family],
        "members": members,
        "goals": goals,
        "budgets": budgets,
        "alerts": alerts,
        "content": content,
        "investments": investments,
        "services": services,
    }


async def seed_demo_data(store: EntityStoreInterface) -> bool:
    """
    Load the demo family into `store` if it holds no family yet.

    Returns:
        True if data was written, False if the store already had data
    """
    if not await store.is_empty():
        return False

    demo = build_demo_family()

    for family in demo["families"]:
        await store.create_family(family)
    for member in demo["members"]:
        await store.create_family_member(member)
    for goal in demo["goals"]:
        await store.create_family_goal(goal)
    for budget in demo["budgets"]:
        await store.create_budget(budget)
    for alert in demo["alerts"]:
        await store.create_alert(alert)
    for item in demo["content"]:
        await store.create_educational_content(item)
    for investment in demo["investments"]:
        await store.create_investment(investment)
    for service in demo["services"]:
        await store.create_financial_service(service)

    return True
