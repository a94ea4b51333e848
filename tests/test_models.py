"""
Tests for Aetherius models

Test strategy:
1. Unit tests for individual models and validators
2. Wire format checks (camelCase keys, decimal strings)
3. No store or network access
"""

import pytest
from datetime import datetime
from decimal import Decimal

from pydantic import ValidationError

from aetherius.models import (
    AgeGroup,
    AlertSeverity,
    AlertType,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Budget,
    BudgetCategories,
    BudgetCategory,
    BudgetFields,
    BudgetSpend,
    BudgetUpdate,
    CategoryBudget,
    ContentType,
    EducationalContent,
    FamilyCreate,
    FamilyGoal,
    FamilyMember,
    FamilyMemberUpdate,
    FinancialServiceCreate,
    FinancialServiceType,
    InsuranceDetails,
    OverspendingAlertData,
    SmartAlertCreate,
    TransactionFields,
    month_key,
)
from aetherius.models.common import merge_update, round_half_up


class TestFamilyModels:
    """Tests for family, member and goal models."""

    def test_family_defaults_balance_to_zero(self):
        """A new family starts with a zero display balance."""
        family = FamilyCreate(name="The Patels")
        assert family.total_balance == Decimal("0.00")

    def test_family_strips_whitespace(self):
        """Whitespace around names is stripped."""
        family = FamilyCreate(name="  The Patels  ")
        assert family.name == "The Patels"

    def test_family_rejects_empty_name(self):
        """An empty family name is rejected."""
        with pytest.raises(ValidationError):
            FamilyCreate(name="")

    def test_money_is_quantized_to_cents(self):
        """Amounts are always carried with two decimal places."""
        family = FamilyCreate(name="Test", total_balance=Decimal("100"))
        assert str(family.total_balance) == "100.00"

    def test_money_rejects_sub_cent_precision(self):
        """More than two decimal places is a validation error."""
        with pytest.raises(ValidationError):
            FamilyCreate(name="Test", total_balance=Decimal("1.005"))

    def test_member_accepts_camel_case_input(self):
        """Wire names are accepted on input."""
        member = FamilyMember.model_validate({
            "familyId": "family-1",
            "name": "Dad",
            "role": "Family Head",
            "isActive": False,
        })
        assert member.family_id == "family-1"
        assert member.is_active is False

    def test_member_serializes_camel_case(self):
        """Wire output uses camelCase keys and decimal strings."""
        member = FamilyMember(family_id="family-1", name="Mom", role="Co-Manager", balance=Decimal("67240"))
        data = member.model_dump(mode="json", by_alias=True)
        assert data["familyId"] == "family-1"
        assert data["isActive"] is True
        assert data["balance"] == "67240.00"

    def test_goal_percentage_rounds_half_up(self):
        """Goal progress is a whole percent, halves rounded up."""
        goal = FamilyGoal(
            family_id="family-1",
            name="Vacation",
            target_amount=Decimal("200"),
            current_amount=Decimal("1"),
        )
        assert goal.percentage == 1

    def test_goal_quarter_funded(self):
        """250 of 1000 is 25 percent."""
        goal = FamilyGoal(
            family_id="family-1",
            name="New Laptop",
            target_amount=Decimal("1000"),
            current_amount=Decimal("250"),
        )
        assert goal.percentage == 25

    def test_goal_percentage_with_zero_target(self):
        """A zero target reports zero progress instead of dividing by zero."""
        goal = FamilyGoal(family_id="family-1", name="Someday", target_amount=Decimal("0"))
        assert goal.percentage == 0

    def test_goal_percentage_is_serialized(self):
        """The derived percentage is part of the wire format."""
        goal = FamilyGoal(
            family_id="family-1",
            name="Emergency Fund",
            target_amount=Decimal("100000"),
            current_amount=Decimal("85000"),
        )
        assert goal.model_dump(by_alias=True)["percentage"] == 85

    def test_goal_rejects_negative_target(self):
        """Negative targets are rejected."""
        with pytest.raises(ValidationError):
            FamilyGoal(family_id="family-1", name="Bad", target_amount=Decimal("-1"))


class TestPartialUpdates:
    """Tests for merge_update."""

    def test_only_sent_fields_change(self):
        """Fields missing from the update keep their stored values."""
        member = FamilyMember(family_id="family-1", name="Alex", role="Student", age=16)
        updated = merge_update(member, FamilyMemberUpdate(status="Learning"))
        assert updated.status == "Learning"
        assert updated.name == "Alex"
        assert updated.age == 16
        assert updated.id == member.id

    def test_null_leaves_field_unchanged(self):
        """A field explicitly sent as null is ignored."""
        member = FamilyMember(family_id="family-1", name="Alex", role="Student")
        updates = FamilyMemberUpdate.model_validate({"name": None, "isActive": False})
        updated = merge_update(member, updates)
        assert updated.name == "Alex"
        assert updated.is_active is False

    def test_overrides_win(self):
        """Keyword overrides are applied on top of the update."""
        member = FamilyMember(family_id="family-1", name="Alex", role="Student")
        updated = merge_update(member, FamilyMemberUpdate(name="Alexander"), role="Graduate")
        assert updated.name == "Alexander"
        assert updated.role == "Graduate"


class TestBudgetModels:
    """Tests for budget models."""

    def test_month_must_be_year_month(self):
        """Budget months are YYYY-MM."""
        with pytest.raises(ValidationError):
            BudgetFields(month="2025-13", total_budget=Decimal("100"))
        with pytest.raises(ValidationError):
            BudgetFields(month="March", total_budget=Decimal("100"))

    def test_categories_default_to_zero(self):
        """Every category exists even when not sent."""
        categories = BudgetCategories()
        assert categories.healthcare.budget == Decimal("0.00")
        assert categories.healthcare.spent == Decimal("0.00")

    def test_unknown_category_rejected(self):
        """The category set is closed."""
        with pytest.raises(ValidationError):
            BudgetCategories.model_validate({"pets": {"budget": "100", "spent": "0"}})

    def test_category_lookup_is_case_insensitive(self):
        """Lookups accept any casing and report unknown names as None."""
        categories = BudgetCategories(food=CategoryBudget(budget=Decimal("1000")))
        assert categories.get("Food").budget == Decimal("1000.00")
        assert categories.get("pets") is None

    def test_with_spend_updates_bucket_and_total(self):
        """Recording spend touches one bucket and the total."""
        budget = Budget(
            family_id="family-1",
            month="2025-03",
            total_budget=Decimal("1000"),
            total_spent=Decimal("100"),
            categories=BudgetCategories(food=CategoryBudget(budget=Decimal("500"), spent=Decimal("100"))),
        )
        updated = budget.with_spend(BudgetCategory.FOOD, Decimal("50.25"))
        assert updated.categories.food.spent == Decimal("150.25")
        assert updated.total_spent == Decimal("150.25")
        assert updated.categories.transport.spent == Decimal("0.00")
        assert budget.categories.food.spent == Decimal("100.00")

    def test_with_limits_merges_bucket_by_bucket(self):
        """New limits land on the named buckets; spend and other buckets are kept."""
        budget = Budget(
            family_id="family-1",
            month="2025-03",
            total_budget=Decimal("1000"),
            total_spent=Decimal("850"),
            categories=BudgetCategories(food=CategoryBudget(budget=Decimal("1000"), spent=Decimal("850"))),
        )
        updates = BudgetUpdate.model_validate(
            {"categories": {"shopping": {"budget": 500}, "food": {"budget": 1200}}}
        )
        updated = budget.with_limits(updates)

        assert updated.categories.food == CategoryBudget(budget=Decimal("1200"), spent=Decimal("850"))
        assert updated.categories.shopping.budget == Decimal("500.00")
        assert updated.total_spent == Decimal("850.00")
        assert updated.total_budget == Decimal("1000.00")
        assert updates.touched_categories() == [BudgetCategory.FOOD, BudgetCategory.SHOPPING]

    def test_budget_update_has_no_spend_fields(self):
        """Spend sent in an update is ignored."""
        updates = BudgetUpdate.model_validate({"totalSpent": 5, "categories": {"food": {"spent": 5}}})
        assert "total_spent" not in BudgetUpdate.model_fields
        assert updates.categories.food.budget is None

    def test_budget_update_rejects_unknown_bucket(self):
        """Limit changes only name the fixed buckets."""
        with pytest.raises(ValidationError):
            BudgetUpdate.model_validate({"categories": {"pets": {"budget": 10}}})

    def test_spend_amount_must_be_positive(self):
        """Zero or negative spend is rejected."""
        with pytest.raises(ValidationError):
            BudgetSpend(category=BudgetCategory.FOOD, amount=Decimal("0"))

    def test_month_key(self):
        """A timestamp maps to its YYYY-MM month."""
        assert month_key(datetime(2025, 3, 31, 23, 59)) == "2025-03"


class TestTransactionModels:
    """Tests for transaction models."""

    def test_amount_must_be_positive(self):
        """Transaction amounts are strictly positive."""
        with pytest.raises(ValidationError):
            TransactionFields(amount=Decimal("-5"), category="food", type="expense")

    def test_unknown_type_rejected(self):
        """Only the four transaction types are accepted."""
        with pytest.raises(ValidationError):
            TransactionFields(amount=Decimal("5"), category="food", type="refund")


class TestAlertModels:
    """Tests for smart alert payloads."""

    def test_overspending_data_parsed_from_dict(self):
        """A raw payload is parsed with the model for the alert type."""
        alert = SmartAlertCreate.model_validate({
            "familyId": "family-1",
            "type": "overspending",
            "title": "Food Budget Alert",
            "message": "You've spent 95.0% of your food budget",
            "severity": "medium",
            "data": {"category": "food", "percentage": 95},
        })
        assert isinstance(alert.data, OverspendingAlertData)
        assert alert.data.percentage == 95

    def test_payload_must_match_type(self):
        """A scam alert can't carry an overspending payload."""
        with pytest.raises(ValidationError):
            SmartAlertCreate(
                family_id="family-1",
                type=AlertType.SCAM,
                title="Scam",
                message="Blocked",
                severity=AlertSeverity.HIGH,
                data=OverspendingAlertData(category="food", percentage=95),
            )

    def test_alert_starts_unread(self):
        """New alerts are unread."""
        alert = SmartAlertCreate(
            family_id="family-1",
            type=AlertType.ACHIEVEMENT,
            title="Great Job!",
            message="Ahead of your goal",
            severity=AlertSeverity.LOW,
        )
        assert alert.is_read is False


class TestCatalogModels:
    """Tests for learning and catalog models."""

    def test_ai_generated_alias(self):
        """The AI flag keeps its upper-case wire name."""
        content = EducationalContent(title="Budgeting 101", content="...", type=ContentType.LESSON)
        data = content.model_dump(by_alias=True)
        assert "isAIGenerated" in data
        assert data["isAIGenerated"] is False

    def test_content_matches_all_ages(self):
        """Items for all ages match any age filter."""
        content = EducationalContent(
            title="Budget Challenge",
            content="...",
            type=ContentType.GAME,
            age_group=AgeGroup.ALL,
        )
        assert content.matches(age_group=AgeGroup.TEENS)
        assert content.matches(content_type=ContentType.GAME)
        assert not content.matches(content_type=ContentType.LESSON)

    def test_service_details_parsed_by_type(self):
        """Service details are parsed with the model for the service type."""
        service = FinancialServiceCreate.model_validate({
            "familyId": "family-1",
            "type": "insurance",
            "name": "Life Insurance",
            "details": {"policies": 3, "coverage": "Life, Health, Term"},
        })
        assert isinstance(service.details, InsuranceDetails)

    def test_service_details_must_match_type(self):
        """Loan details on an insurance service are rejected."""
        with pytest.raises(ValidationError):
            FinancialServiceCreate.model_validate({
                "familyId": "family-1",
                "type": FinancialServiceType.INSURANCE.value,
                "name": "Life Insurance",
                "details": {"remaining": "18,50,000", "tenure": "15 years"},
            })


class TestRounding:
    """Tests for the shared rounding helper."""

    def test_halves_round_up(self):
        """0.5 goes up, never to even."""
        assert round_half_up(Decimal("92.5")) == 93
        assert round_half_up(Decimal("92.4")) == 92


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_RECORDED,
            description="Transaction recorded",
        )
        assert event.event_type == AuditEventType.TRANSACTION_RECORDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.BUDGET_SPEND_RECORDED,
            description="Budget spend recorded",
            details={"category": "food", "amount": "1000.00"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "budget_spend_recorded"
        assert log_dict["details"]["category"] == "food"
        assert "correlation_id" not in log_dict

    def test_audit_event_builder_alert_raised(self):
        """Raised alerts are logged as warnings."""
        event = AuditEventBuilder.alert_raised(
            alert_id="alert-1",
            family_id="family-1",
            alert_type="overspending",
            severity="high",
            title="Shopping Budget Alert",
            correlation_id="req-1",
        )
        assert event.event_type == AuditEventType.ALERT_RAISED
        assert event.severity == AuditSeverity.WARNING
        assert event.entity_id == "alert-1"
        assert event.to_log_dict()["correlation_id"] == "req-1"

    def test_audit_event_builder_generation_failed(self):
        """Generation failures carry the error message."""
        event = AuditEventBuilder.generation_failed("scam_check", "timeout")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "timeout"
        assert event.details["operation"] == "scam_check"
