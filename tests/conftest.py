"""
Shared fixtures: in-memory MongoDB, a scriptable AI provider, and token helpers.

Every test gets a fresh mongomock database (with the real indexes), a fresh
rate limiter and no AI provider unless it installs one via the `ai` fixture.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.auth import create_admin_token
from app.core.rate_limit import RateLimiter, get_ai_rate_limiter
from app.db.mongodb import get_mongo_db, init_mongo_indexes
from app.services.ai import AIProvider, AIProviderError, get_ai_provider


class FakeProvider(AIProvider):
    """AI provider that returns a canned reply and records prompts."""

    def __init__(self, reply: str = "", error: str = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate_text(self, prompt, system_prompt=None, max_tokens=1024, temperature=None):
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt})
        if self.error:
            raise AIProviderError(self.error)
        return self.reply

    @property
    def name(self) -> str:
        return "fake"


class AIState:
    provider = None


@pytest.fixture
def db():
    database = mongomock.MongoClient()["achievement_tracker_test"]
    init_mongo_indexes(database)
    return database


@pytest.fixture
def ai():
    """Set `ai.provider` to a FakeProvider to enable AI for a test."""
    return AIState()


@pytest.fixture
def client(db, ai):
    limiter = RateLimiter(limit=15, window=60)
    app.dependency_overrides[get_mongo_db] = lambda: db
    app.dependency_overrides[get_ai_provider] = lambda: ai.provider
    app.dependency_overrides[get_ai_rate_limiter] = lambda: limiter
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, username="alice", roll_number="R1", name="Alice Student", password="secret123"):
    response = client.post("/api/students/register", json={
        "username": username,
        "password": password,
        "rollNumber": roll_number,
        "name": name,
    })
    assert response.status_code == 201, response.text
    return response.json()["token"]


def achievement_payload(**overrides) -> dict:
    payload = {
        "studentName": "Alice Student",
        "rollNumber": "R1",
        "achievementTitle": "Smart Irrigation System",
        "achievementDescription": "Built an IoT prototype with Python and Arduino",
        "category": "project",
        "level": "college",
        "achievementDate": "2024-03-01",
        "issuingAuthority": "Engineering Dept",
        "evidenceLink": "http://e",
    }
    payload.update(overrides)
    return payload


def log_achievement(client, token, **overrides) -> dict:
    response = client.post("/api/achievements/log", json=achievement_payload(**overrides), headers=auth(token))
    assert response.status_code == 201, response.text
    return response.json()["achievement"]


def validate(client, admin_token, achievement_id, status="validated"):
    response = client.put(
        f"/api/achievements/{achievement_id}/validate",
        json={"status": status},
        headers=auth(admin_token),
    )
    assert response.status_code == 200, response.text
    return response.json()["achievement"]


@pytest.fixture
def admin_token():
    return create_admin_token("admin")


@pytest.fixture
def student_token(client):
    return register(client)
