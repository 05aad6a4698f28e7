"""Pytest fixtures shared by unit and integration tests.

Provides:
- In-memory SQLite database, recreated for every test
- Item factory for seeding lost/found reports
- FastAPI test client
- Fake chat-completions client for the LLM scoring path

Usage:
    def test_suggestions(client, make_item):
        lost = make_item(type=ItemType.LOST)
        response = client.get(f"/api/v1/matches/suggestions/{lost.id}")
"""

import os
from datetime import datetime, timedelta
from types import SimpleNamespace

# Set environment variables BEFORE any lostfound imports so settings pick them up
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""
os.environ["LLM_ENABLED"] = "false"
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
from fastapi.testclient import TestClient

from lostfound.db.base import Base
from lostfound.db.session import engine, SessionLocal
from lostfound.models import Item, ItemStatus, ItemType
from lostfound.matching.scorer import SimilarityScorer


BASE_TIME = datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def db():
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_item(db):
    """Factory persisting items with increasing created_at timestamps."""
    counter = {"n": 0}

    def _make(**overrides) -> Item:
        counter["n"] += 1
        fields = {
            "title": "Blue Nike Backpack",
            "description": "Lost near library, has a dent on front pocket",
            "category": "Bags",
            "location": "Main Library",
            "type": ItemType.LOST,
            "status": ItemStatus.ACTIVE,
            "created_at": BASE_TIME + timedelta(minutes=counter["n"]),
        }
        fields.update(overrides)
        item = Item(**fields)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _make


@pytest.fixture
def fallback_scorer():
    """Scorer with no LLM configured."""
    return SimilarityScorer()


@pytest.fixture
def client(db):
    from lostfound.main import app

    with TestClient(app) as test_client:
        yield test_client


class FakeCompletions:
    """Stands in for client.chat.completions of the OpenAI SDK."""

    def __init__(self, reply: str | None = "90", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeLLMClient:
    def __init__(self, reply: str | None = "90", error: Exception | None = None):
        self.chat = SimpleNamespace(completions=FakeCompletions(reply, error))

    @property
    def calls(self) -> list:
        return self.chat.completions.calls


@pytest.fixture
def fake_llm_client():
    """Factory for fake chat-completions clients: fake_llm_client(reply=..., error=...)."""
    return FakeLLMClient
