"""
Pytest configuration and shared fixtures for the Binder tests.
"""
import os
import sys
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, List

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

# Settings are cached on first use; make sure the required values exist first.
TEST_JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-key")
os.environ["SUPABASE_JWT_SECRET"] = TEST_JWT_SECRET

from fake_supabase import FakeSupabase  # noqa: E402


# ============================================================================
# Fixtures: Test Data Factories
# ============================================================================

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_startup_row(index: int, industry: List[str] = None, **overrides) -> dict:
    """A startups row as PostgREST returns it; higher index = newer."""
    row = {
        "id": f"startup-{index:03d}",
        "name": f"Startup {index}",
        "image_url": f"https://cdn.example.com/startups/{index}.png",
        "description": f"Description of startup {index}",
        "stage": ["Seed"],
        "size": ["1-10"],
        "industry": industry if industry is not None else ["Fintech"],
        "created_at": (BASE_TIME + timedelta(hours=index)).isoformat(),
        "ace_score": 50 + (index % 50),
    }
    row.update(overrides)
    return row


@pytest.fixture
def startup_row_factory() -> Callable[..., dict]:
    return make_startup_row


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Empty in-memory Supabase."""
    return FakeSupabase()


@pytest.fixture
def seeded_db(fake_db: FakeSupabase) -> FakeSupabase:
    """40 Fintech startups and 10 Gaming startups."""
    rows = [make_startup_row(i, ["Fintech"]) for i in range(40)]
    rows += [make_startup_row(100 + i, ["Gaming", "Education"]) for i in range(10)]
    fake_db.tables["startups"] = rows
    return fake_db


# ============================================================================
# Fixtures: Settings
# ============================================================================

@pytest.fixture(autouse=True)
def _reset_settings_cache():
    from config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# JWT Token Generation
# ============================================================================

def generate_test_jwt(user_id: str = "investor-a", exp_hours: int = 24, **claims) -> str:
    """Generate an HS256 Supabase-style JWT signed with the test secret."""
    import jwt

    now = int(time.time())
    payload = {
        "sub": user_id,
        "aud": "authenticated",
        "role": "authenticated",
        "email": f"{user_id}@test.com",
        "aal": "aal1",
        "exp": now + (exp_hours * 3600),
        "iat": now,
        "is_anonymous": False,
    }
    payload.update(claims)
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {generate_test_jwt('investor-a')}"}


@pytest.fixture
def auth_headers_b() -> dict:
    return {"Authorization": f"Bearer {generate_test_jwt('investor-b')}"}


# ============================================================================
# Fixtures: FastAPI Test Client
# ============================================================================

@pytest.fixture
def app(seeded_db: FakeSupabase):
    """The FastAPI app with every service bound to the seeded fake database."""
    from api import dependencies
    from api.app import create_app

    application = create_app()
    application.dependency_overrides[dependencies.get_client] = lambda: seeded_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient
    return TestClient(app)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "supabase: needs a live Supabase project")
