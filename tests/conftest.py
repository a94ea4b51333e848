"""
Shared fixtures.

No test talks to Gemini: a FakeTextGenerator returns canned replies
and records every prompt it was given.
"""

import json
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from aetherius.agents import AdviceGateway, TextGenerator
from aetherius.api import create_app
from aetherius.audit import AuditLogger
from aetherius.config import DatabaseSettings, GeminiSettings
from aetherius.orchestrator import create_app_components
from aetherius.services.storage import InMemoryEntityStore, SQLAlchemyEntityStore


SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


class FakeTextGenerator(TextGenerator):
    """Returns queued replies in order, or raises a queued error."""

    def __init__(self, replies: Optional[list] = None):
        self.replies = list(replies or [])
        self.calls: list[dict] = []

    def queue(self, reply) -> None:
        self.replies.append(reply)

    def queue_json(self, payload: dict) -> None:
        self.replies.append(json.dumps(payload))

    async def generate(
        self,
        prompt: str,
        *,
        system_instruction: str,
        model_name: str,
        json_output: bool = False,
    ) -> str:
        self.calls.append({
            "prompt": prompt,
            "system_instruction": system_instruction,
            "model_name": model_name,
            "json_output": json_output,
        })
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_generator() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest.fixture
def gemini_settings() -> GeminiSettings:
    return GeminiSettings(
        advice_model_name="advice-model",
        structured_model_name="structured-model",
    )


@pytest.fixture
def gateway(fake_generator, gemini_settings) -> AdviceGateway:
    return AdviceGateway(fake_generator, gemini_settings, AuditLogger())


@pytest.fixture(params=["memory", "sqlalchemy"])
async def store(request):
    """Every store contract test runs against both implementations."""
    if request.param == "memory":
        entity_store = InMemoryEntityStore()
    else:
        entity_store = SQLAlchemyEntityStore(DatabaseSettings(url=SQLITE_MEMORY_URL))

    await entity_store.connect()
    yield entity_store
    await entity_store.close()


@pytest.fixture
def memory_store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def components(memory_store, fake_generator):
    return create_app_components(store=memory_store, generator=fake_generator)


@pytest.fixture
def client(components):
    """API client; entering the context runs the app lifespan."""
    app = create_app(components)
    with TestClient(app) as test_client:
        yield test_client
