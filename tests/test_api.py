"""
API tests.

Run the FastAPI app against the in-memory store with a fake text
generator. Requests and responses use the camelCase wire format.
"""

import json

import pytest
from fastapi.testclient import TestClient

from aetherius.api import create_app
from aetherius.models.common import utcnow
from aetherius.models import month_key
from aetherius.orchestrator import create_app_components
from aetherius.services.storage import InMemoryEntityStore, StorageError


@pytest.fixture
def family_id(client) -> str:
    response = client.post("/api/family", json={"name": "The Johnson Family", "totalBalance": 245670})
    return response.json()["id"]


@pytest.fixture
def current_month() -> str:
    return month_key(utcnow())


class TestHealth:
    """Liveness and request ids."""

    def test_health(self, client):
        """Health reports the store backend."""
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["backend"] == "memory"

    def test_request_id_echoed(self, client):
        """A client-supplied request id comes back on the response."""
        response = client.get("/api/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client):
        """Requests without an id get a fresh one."""
        response = client.get("/api/health")
        assert response.headers["X-Request-ID"]


class TestFamilyRoutes:
    """Families, members and goals."""

    def test_create_family(self, client):
        """Families are created with 201 and camelCase output."""
        response = client.post("/api/family", json={"name": "The Patels", "totalBalance": "1000.5"})
        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "The Patels"
        assert body["totalBalance"] == "1000.50"
        assert "createdAt" in body

    def test_create_family_invalid(self, client):
        """A missing name is a 400 with a message body."""
        response = client.post("/api/family", json={})
        assert response.status_code == 400
        assert response.json()["message"].startswith("Invalid request data")

    def test_get_unknown_family(self, client):
        """Unknown families are a 404 with a message body."""
        response = client.get("/api/family/nope")
        assert response.status_code == 404
        assert response.json() == {"message": "Family not found"}

    def test_family_snapshot_hides_inactive_members(self, client, family_id):
        """Deactivating a member removes it from the family snapshot."""
        dad = client.post(
            f"/api/family/{family_id}/members",
            json={"name": "Dad", "role": "Family Head", "age": 42, "balance": 85430},
        ).json()
        alex = client.post(
            f"/api/family/{family_id}/members",
            json={"name": "Alex", "role": "Student", "age": 16},
        ).json()
        assert alex["familyId"] == family_id

        response = client.patch(f"/api/members/{alex['id']}", json={"isActive": False})
        assert response.status_code == 200
        assert response.json()["isActive"] is False

        snapshot = client.get(f"/api/family/{family_id}").json()
        assert snapshot["family"]["id"] == family_id
        assert [m["id"] for m in snapshot["members"]] == [dad["id"]]

        members = client.get(f"/api/family/{family_id}/members").json()
        assert [m["name"] for m in members] == ["Dad"]

    def test_patch_unknown_member(self, client):
        """Patching a missing member is a 404."""
        response = client.patch("/api/members/nope", json={"name": "X"})
        assert response.status_code == 404

    def test_goal_lifecycle(self, client, family_id):
        """Goals are created, read and updated with a derived percentage."""
        response = client.post(
            f"/api/family/{family_id}/goals",
            json={
                "name": "Family Vacation to Goa",
                "targetAmount": 75000,
                "currentAmount": 45000,
                "contributors": ["member-1", "member-2"],
            },
        )
        assert response.status_code == 201
        goal = response.json()
        assert goal["percentage"] == 60

        assert client.get(f"/api/goals/{goal['id']}").json()["name"] == "Family Vacation to Goa"

        updated = client.patch(f"/api/goals/{goal['id']}", json={"currentAmount": 75000}).json()
        assert updated["percentage"] == 100
        assert updated["contributors"] == ["member-1", "member-2"]

        assert len(client.get(f"/api/family/{family_id}/goals").json()) == 1

    def test_get_unknown_goal(self, client):
        """Unknown goals are a 404."""
        assert client.get("/api/goals/nope").status_code == 404


class TestBudgetRoutes:
    """Budgets and spend."""

    def test_budget_create_and_read(self, client, family_id):
        """A budget is readable by family and month."""
        response = client.post(
            f"/api/family/{family_id}/budget",
            json={
                "month": "2025-03",
                "totalBudget": 95000,
                "categories": {"food": {"budget": 25000, "spent": 22340}},
            },
        )
        assert response.status_code == 201

        budget = client.get(f"/api/family/{family_id}/budget/2025-03").json()
        assert budget["categories"]["food"] == {"budget": "25000.00", "spent": "22340.00"}
        assert budget["categories"]["healthcare"] == {"budget": "0.00", "spent": "0.00"}

    def test_missing_budget_is_404(self, client, family_id):
        """No budget for the month is a 404."""
        response = client.get(f"/api/family/{family_id}/budget/2025-04")
        assert response.status_code == 404

    def test_bad_month_is_400(self, client, family_id):
        """Months must be YYYY-MM."""
        assert client.get(f"/api/family/{family_id}/budget/March").status_code == 400

    def test_unknown_category_rejected(self, client, family_id):
        """Budgets only have the fixed buckets."""
        response = client.post(
            f"/api/family/{family_id}/budget",
            json={"month": "2025-03", "totalBudget": 100, "categories": {"pets": {"budget": 10}}},
        )
        assert response.status_code == 400

    def test_record_spend(self, client, family_id):
        """Spend moves the bucket and the total."""
        budget = client.post(
            f"/api/family/{family_id}/budget",
            json={"month": "2025-03", "totalBudget": 95000, "categories": {"food": {"budget": 25000}}},
        ).json()

        response = client.post(f"/api/budgets/{budget['id']}/spend", json={"category": "food", "amount": 1200})
        assert response.status_code == 200
        assert response.json()["categories"]["food"]["spent"] == "1200.00"
        assert response.json()["totalSpent"] == "1200.00"

    def test_spend_unknown_budget(self, client):
        """Spend on a missing budget is a 404."""
        response = client.post("/api/budgets/nope/spend", json={"category": "food", "amount": 10})
        assert response.status_code == 404

    def test_patch_budget(self, client, family_id):
        """Budgets can be partially updated."""
        budget = client.post(
            f"/api/family/{family_id}/budget",
            json={"month": "2025-03", "totalBudget": 95000},
        ).json()
        updated = client.patch(f"/api/budgets/{budget['id']}", json={"totalBudget": 100000}).json()
        assert updated["totalBudget"] == "100000.00"
        assert updated["month"] == "2025-03"

    def test_patch_one_bucket_keeps_spend(self, client, family_id, current_month):
        """Changing one bucket's limit keeps every bucket's spend, so the rule still fires."""
        budget = client.post(
            f"/api/family/{family_id}/budget",
            json={"month": current_month, "totalBudget": 5000, "categories": {"food": {"budget": 1000}}},
        ).json()
        client.post(f"/api/budgets/{budget['id']}/spend", json={"category": "food", "amount": 850})

        response = client.patch(
            f"/api/budgets/{budget['id']}",
            json={"categories": {"shopping": {"budget": 500}}},
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["categories"]["food"] == {"budget": "1000.00", "spent": "850.00"}
        assert updated["categories"]["shopping"] == {"budget": "500.00", "spent": "0.00"}
        assert updated["totalSpent"] == "850.00"

        client.post(
            f"/api/family/{family_id}/transactions",
            json={"amount": 100, "category": "food", "type": "expense"},
        )
        alerts = client.get(f"/api/family/{family_id}/alerts").json()
        assert [alert["data"] for alert in alerts] == [{"category": "food", "percentage": 95}]

    def test_patch_unknown_bucket_is_400(self, client, family_id):
        """Limit changes only name the fixed buckets."""
        budget = client.post(
            f"/api/family/{family_id}/budget",
            json={"month": "2025-03", "totalBudget": 95000},
        ).json()
        response = client.patch(f"/api/budgets/{budget['id']}", json={"categories": {"pets": {"budget": 10}}})
        assert response.status_code == 400

    def test_patch_unknown_budget_is_404(self, client):
        """Patching a missing budget is a 404."""
        assert client.patch("/api/budgets/nope", json={"totalBudget": 1}).status_code == 404


class TestTransactionRoutes:
    """Transactions and the alerts they raise."""

    def test_overspending_expense_creates_alert(self, client, family_id, current_month):
        """An expense past the threshold shows up as an unread alert."""
        client.post(
            f"/api/family/{family_id}/budget",
            json={
                "month": current_month,
                "totalBudget": 95000,
                "categories": {"shopping": {"budget": 27000, "spent": 24000}},
            },
        )

        response = client.post(
            f"/api/family/{family_id}/transactions",
            json={"amount": 960, "category": "shopping", "type": "expense", "description": "Diwali shopping"},
        )
        assert response.status_code == 201
        assert response.json()["amount"] == "960.00"
        assert "date" in response.json()

        alerts = client.get(f"/api/family/{family_id}/alerts").json()
        assert len(alerts) == 1
        alert = alerts[0]
        assert alert["type"] == "overspending"
        assert alert["severity"] == "medium"
        assert alert["isRead"] is False
        assert alert["data"] == {"category": "shopping", "percentage": 92}

        read = client.patch(f"/api/alerts/{alert['id']}/read")
        assert read.status_code == 200
        assert read.json()["isRead"] is True

    def test_small_expense_no_alert(self, client, family_id, current_month):
        """Staying under the threshold raises nothing."""
        client.post(
            f"/api/family/{family_id}/budget",
            json={"month": current_month, "totalBudget": 1000, "categories": {"food": {"budget": 1000}}},
        )
        client.post(
            f"/api/family/{family_id}/transactions",
            json={"amount": 100, "category": "food", "type": "expense"},
        )
        assert client.get(f"/api/family/{family_id}/alerts").json() == []

    def test_list_default_limit(self, client, family_id):
        """Without a limit at most 50 transactions come back."""
        for _ in range(55):
            client.post(
                f"/api/family/{family_id}/transactions",
                json={"amount": 1, "category": "food", "type": "expense"},
            )
        assert len(client.get(f"/api/family/{family_id}/transactions").json()) == 50
        assert len(client.get(f"/api/family/{family_id}/transactions?limit=5").json()) == 5

    def test_invalid_limit(self, client, family_id):
        """The limit must be positive."""
        assert client.get(f"/api/family/{family_id}/transactions?limit=0").status_code == 400

    def test_invalid_transaction(self, client, family_id):
        """Negative amounts are rejected."""
        response = client.post(
            f"/api/family/{family_id}/transactions",
            json={"amount": -5, "category": "food", "type": "expense"},
        )
        assert response.status_code == 400
        assert "amount" in response.json()["message"]

    def test_mark_unknown_alert(self, client):
        """Unknown alerts are a 404."""
        response = client.patch("/api/alerts/nope/read")
        assert response.status_code == 404
        assert response.json() == {"message": "Alert not found"}


class TestLearningRoutes:
    """Educational content and progress."""

    def test_progress_upsert(self, client):
        """Posting twice for the same content keeps one record."""
        first = client.post(
            "/api/members/member-3/learning-progress",
            json={"contentId": "content-1", "progress": 40},
        )
        assert first.status_code == 200
        second = client.post(
            "/api/members/member-3/learning-progress",
            json={"contentId": "content-1", "progress": 100, "completed": True},
        )
        assert second.json()["id"] == first.json()["id"]

        records = client.get("/api/members/member-3/learning-progress").json()
        assert len(records) == 1
        assert records[0]["completed"] is True
        assert "lastAccessed" in records[0]

    def test_progress_out_of_range(self, client):
        """Progress is a percentage."""
        response = client.post(
            "/api/members/member-3/learning-progress",
            json={"contentId": "content-1", "progress": 140},
        )
        assert response.status_code == 400

    def test_unknown_age_group_is_400(self, client):
        """Filters outside the known values are rejected."""
        assert client.get("/api/educational-content?ageGroup=seniors").status_code == 400

    def test_generated_lesson_is_stored(self, client, fake_generator):
        """A generated lesson is added to the catalog as AI content."""
        fake_generator.queue(json.dumps({
            "title": "Pocket Money Basics",
            "description": "Saving a little every week.",
            "content": "When you get pocket money, put some aside first...",
            "duration": 5,
        }))

        response = client.post(
            "/api/ai/educational-content",
            json={"topic": "saving", "ageGroup": "children", "difficulty": "beginner"},
        )
        assert response.status_code == 201
        lesson = response.json()
        assert lesson["isAIGenerated"] is True
        assert lesson["type"] == "lesson"
        assert lesson["category"] == "saving"

        catalog = client.get("/api/educational-content?ageGroup=children&type=lesson").json()
        assert [item["id"] for item in catalog] == [lesson["id"]]
        assert client.get("/api/educational-content?ageGroup=adults").json() == []

        fetched = client.get(f"/api/educational-content/{lesson['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["title"] == "Pocket Money Basics"

    def test_unknown_content_is_404(self, client):
        """Unknown catalog ids are a 404 with a message."""
        response = client.get("/api/educational-content/nope")
        assert response.status_code == 404
        assert response.json() == {"message": "Educational content not found"}


class TestCatalogRoutes:
    """Investments and financial services."""

    def test_investments(self, client):
        """Investments are created and listed."""
        response = client.post(
            "/api/investments",
            json={"name": "Fixed Deposit", "type": "fd", "returns": 7.2, "risk": "low", "minInvestment": 5000},
        )
        assert response.status_code == 201
        assert client.get("/api/investments").json()[0]["minInvestment"] == "5000.00"

    def test_financial_services(self, client, family_id):
        """Services keep their typed details."""
        response = client.post(
            f"/api/family/{family_id}/financial-services",
            json={
                "type": "credit_score",
                "name": "Credit Score",
                "amount": 785,
                "details": {"rating": "Excellent", "lastUpdated": "Nov 15"},
            },
        )
        assert response.status_code == 201

        services = client.get(f"/api/family/{family_id}/financial-services").json()
        assert services[0]["details"] == {"rating": "Excellent", "lastUpdated": "Nov 15"}


class TestAIRoutes:
    """AI endpoints with the fake generator."""

    def test_financial_advice(self, client, fake_generator):
        """Advice comes back as {advice}."""
        fake_generator.queue("Build a 6-month emergency fund before investing.")

        response = client.post(
            "/api/ai/financial-advice",
            json={"question": "Should we invest?", "context": {"memberCount": 4, "budgetUsage": 82.5}},
        )
        assert response.status_code == 200
        assert response.json() == {"advice": "Build a 6-month emergency fund before investing."}
        assert "Current Budget Usage: 82.5%" in fake_generator.calls[0]["prompt"]

    def test_empty_question_is_400(self, client):
        """A question is required."""
        assert client.post("/api/ai/financial-advice", json={"question": ""}).status_code == 400

    def test_generation_failure_is_500(self, client, fake_generator):
        """Provider failures become a 500 with a message body."""
        fake_generator.queue(RuntimeError("quota exceeded"))

        response = client.post("/api/ai/financial-advice", json={"question": "Should we invest?"})
        assert response.status_code == 500
        assert response.json() == {"message": "Failed to generate AI response"}

    def test_spending_analysis(self, client, fake_generator):
        """Analysis is returned in camelCase."""
        fake_generator.queue(json.dumps({
            "insights": ["Shopping is 92% used"],
            "recommendations": ["Pause non-essential shopping"],
            "riskLevel": "medium",
        }))

        response = client.post(
            "/api/ai/spending-analysis",
            json={
                "transactions": [
                    {"amount": 960, "category": "shopping", "type": "expense", "date": "2025-03-02T10:00:00"},
                ],
                "budgetLimits": {"shopping": 27000},
            },
        )
        assert response.status_code == 200
        assert response.json()["riskLevel"] == "medium"

    def test_scam_check(self, client, fake_generator):
        """Scam assessments are returned in camelCase."""
        fake_generator.queue(json.dumps({
            "isScamLikely": True,
            "confidence": 90,
            "reasons": ["Unknown recipient"],
            "recommendations": ["Block the sender"],
        }))

        response = client.post(
            "/api/ai/scam-check",
            json={
                "amount": 15000,
                "description": "Lottery processing fee",
                "recipient": "prize@upi",
                "method": "UPI",
                "timestamp": "2025-03-01T22:14:00Z",
            },
        )
        assert response.status_code == 200
        assert response.json()["isScamLikely"] is True

    def test_goal_plan_bad_reply_is_500(self, client, fake_generator):
        """A reply missing fields is not patched up."""
        fake_generator.queue(json.dumps({"monthlyContribution": 5000}))

        response = client.post(
            "/api/ai/goal-plan",
            json={
                "goal": {"name": "Goa", "targetAmount": 30000, "timeframe": "6 months", "priority": "high"},
                "familyFinances": {
                    "monthlyIncome": 120000,
                    "monthlyExpenses": 95000,
                    "currentSavings": 50000,
                    "memberCount": 4,
                },
            },
        )
        assert response.status_code == 500


class BrokenStore(InMemoryEntityStore):
    async def list_investments(self):
        raise StorageError("disk on fire")

    async def list_family_alerts(self, family_id):
        raise RuntimeError("unexpected")


class TestErrorHandling:
    """Store and unexpected failures."""

    @pytest.fixture
    def broken_client(self, fake_generator):
        components = create_app_components(store=BrokenStore(), generator=fake_generator)
        with TestClient(create_app(components), raise_server_exceptions=False) as test_client:
            yield test_client

    def test_storage_error_is_500(self, broken_client):
        """Store failures hide their details from the client."""
        response = broken_client.get("/api/investments")
        assert response.status_code == 500
        assert response.json() == {"message": "Failed to access family data"}

    def test_unexpected_error_is_500(self, broken_client):
        """Anything else is an internal error."""
        response = broken_client.get("/api/family/family-1/alerts")
        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error"}
