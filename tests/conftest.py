# tests/conftest.py
import asyncio
import os

# Must be set before the app (and its cached settings / engine) is imported.
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///./test_team_calendar.db")
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.config import get_settings  # noqa: E402
from app.db.session import init_db  # noqa: E402
from app.main import create_app  # noqa: E402


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Shared TestClient fixture for all API tests.

    Uses the application factory so configuration (DB, deps, etc.)
    remains test-friendly.
    """
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fresh_db():
    """
    Reset the schema so each test starts with empty meetings and no
    schedule configuration.
    """
    asyncio.run(init_db())
    yield


@pytest.fixture
def settings():
    """
    The cached Settings instance; patch attributes with monkeypatch.
    """
    return get_settings()
