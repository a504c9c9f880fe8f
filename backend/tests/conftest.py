from __future__ import annotations

import os
import sys
import time
from pathlib import Path

import pytest

# Ensure `backend/` is on sys.path so `import advisor_connect.*` works in tests.
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

TEST_JWT_SECRET = "test-secret-do-not-use"

# Settings are read once at import time, so the environment is pinned first.
os.environ["NODE_ENV"] = "test"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ.pop("OTEL_ENABLED", None)


@pytest.fixture(autouse=True)
def _fresh_stores():
    from advisor_connect.db.registry import reset_stores

    reset_stores()
    yield
    reset_stores()


def mint_token(user_id, role, *, secret: str = TEST_JWT_SECRET, ttl_s: int = 3600, **claims) -> str:
    from jose import jwt

    payload = {"id": user_id, "role": role, "exp": int(time.time()) + ttl_s, **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def make_user():
    """Create a user record; returns the stored dict."""
    from advisor_connect.db.registry import USERS, get_store

    def _make(role: str, **fields):
        n = len(get_store(USERS).list()) + 1
        base = {
            "email": f"user{n}@example.com",
            "firstName": f"First{n}",
            "lastName": f"Last{n}",
            "role": role,
            "status": "active",
        }
        return get_store(USERS).create({**base, **fields})

    return _make


@pytest.fixture
def actor_for():
    from advisor_connect.modules.identity.roles import Actor, normalize_role

    def _actor(user):
        return Actor(id=user["id"], role=normalize_role(user["role"]))

    return _actor


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {mint_token(user['id'], user['role'])}"}

    return _headers


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from advisor_connect.main import create_app

    return TestClient(create_app())


def opportunity_fields(**overrides):
    fields = {
        "title": "Advisor Needed",
        "description": "Help us with our go-to-market plan.",
        "requiredExpertise": ["Marketing"],
        "timeCommitment": "5-10 hours/month",
        "compensation": "Equity",
    }
    fields.update(overrides)
    return fields
