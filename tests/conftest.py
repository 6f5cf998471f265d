"""Pytest configuration and fixtures for prize-wheel-codes.

Uses app.main:app for HTTP tests and app.infrastructure.persistence.database
for DB-dependent fixtures. All imports use app.*.

HTTP tests run against the in-memory code store unless DATABASE_BACKEND is
set in the environment; the env defaults below must be in place before
app.main is imported (create_app() loads settings).
"""

import os

os.environ.setdefault("DATABASE_BACKEND", "memory")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import UTC, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.infrastructure.persistence import database
from app.infrastructure.persistence.repositories import InMemoryCodeStore
from app.infrastructure.security.jwt import create_access_token
from app.main import app

T0 = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Settable clock for RedemptionService(clock=...)."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> InMemoryCodeStore:
    return InMemoryCodeStore()


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI), with lifespan running.

    ASGITransport does not send lifespan events, so startup (code store) and
    shutdown are driven explicitly.
    """
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Bearer headers for operator routes, signed with the test SECRET_KEY."""
    token = create_access_token({"sub": "operator-1"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_BACKEND=postgres and DATABASE_URL. Skips (pytest.skip)
    when Postgres is not configured. Use @pytest.mark.requires_db to mark
    tests that need this fixture; run without DB via: pytest -m 'not requires_db'.
    """
    if get_settings().database_backend != "postgres":
        pytest.skip(
            "Postgres not configured: set DATABASE_BACKEND=postgres and DATABASE_URL, "
            "then run: alembic upgrade head"
        )
    session_factory = database.get_session_factory()
    async with session_factory() as session:
        yield session
        await session.rollback()
    await database.dispose_engine()
