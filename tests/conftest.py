"""
Shared fixtures.

The database location and the bcrypt cost are taken from the environment
when shortener.core.setting is first imported, so they are set here before
anything from the package is imported.
"""

import os
import tempfile

TEST_DB_DIR = tempfile.mkdtemp(prefix="shortener-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_DIR}/test.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.engine import make_url  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from shortener.core.setting import settings  # noqa: E402
from shortener.db.session import async_session_maker  # noqa: E402
from shortener.db.sqlite_adapter import SQLiteAdapter  # noqa: E402
from shortener.main import create_app  # noqa: E402

DEFAULT_PASSWORD = "Password1"

# Sync handle on the same file, for fixtures and for poking at rows directly
sync_engine = create_engine(
    make_url(settings.DATABASE_URL).set(drivername="sqlite"),
    poolclass=NullPool,
)
event.listen(sync_engine, "connect", lambda connection, _: SQLiteAdapter().configure_connection(connection))


def build_app(**overrides):
    """App with a rate limit high enough not to interfere, unless overridden."""
    app_settings = settings.model_copy(update={"API_RATE_LIMIT": 10_000, **overrides})
    return create_app(app_settings, configure_logging=False)


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def reset_database():
    """Every test starts from empty tables."""
    SQLModel.metadata.drop_all(sync_engine)
    SQLModel.metadata.create_all(sync_engine)
    yield


@pytest.fixture
def db():
    with Session(sync_engine) as session:
        yield session


@pytest_asyncio.fixture
async def session():
    async with async_session_maker() as async_session:
        yield async_session


@pytest.fixture
def client():
    with TestClient(build_app()) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register an account and return the response data (user and token)."""

    def _register(username: str = "alice", email: str = None, password: str = DEFAULT_PASSWORD):
        response = client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


@pytest.fixture
def shorten(client):
    """Create a short URL and return the response data."""

    def _shorten(url: str = "https://example.com", token: str = None, **extra):
        headers = auth_headers(token) if token else {}
        response = client.post("/api/urls", json={"url": url, **extra}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _shorten


@pytest.fixture
def app_factory():
    """Build an app with its own settings overrides (and its own rate limiter)."""
    return build_app
