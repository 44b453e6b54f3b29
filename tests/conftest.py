"""
Shared pytest fixtures for the learning center API.
No network: the PostgREST row helpers are swapped for an in-memory store and
access tokens are signed locally with the test JWT secret.
"""
import os
import sys
from datetime import datetime, timedelta, timezone

_tests_dir = os.path.dirname(__file__)
_backend_dir = os.path.join(_tests_dir, "..", "backend")
for _p in (_tests_dir, _backend_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)

os.environ["SUPABASE_URL"] = "https://example.supabase.co"
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "service-role-key"
os.environ["SUPABASE_ANON_KEY"] = "anon-key"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from factories import FakeStore

import auth
import main
import routes.auth_routes
import services.analytics_service
import services.certification_service
import services.content_service
import services.course_service
import services.profile_service
import services.user_admin_service

ROW_CLIENT_USERS = [
    auth,
    routes.auth_routes,
    services.analytics_service,
    services.certification_service,
    services.content_service,
    services.course_service,
    services.profile_service,
    services.user_admin_service,
]

LEARNER_ID = "user-learner"
ADMIN_ID = "user-admin"


def make_token(user_id: str, secret: str = "test-jwt-secret", expires_in: int = 3600) -> str:
    payload = {
        "sub": user_id,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


# ─── pytest fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def store(monkeypatch):
    fake = FakeStore()
    for module in ROW_CLIENT_USERS:
        for name in ("sb_select", "sb_insert", "sb_upsert", "sb_update", "sb_delete", "sb_count"):
            if hasattr(module, name):
                monkeypatch.setattr(module, name, getattr(fake, name))
    fake.seed("user_roles", {"user_id": ADMIN_ID, "role": "admin"})
    fake.seed("user_roles", {"user_id": LEARNER_ID, "role": "student"})
    return fake


@pytest.fixture
def client():
    return TestClient(main.app)


@pytest.fixture
def learner_headers():
    return {"Authorization": f"Bearer {make_token(LEARNER_ID)}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token(ADMIN_ID)}"}
