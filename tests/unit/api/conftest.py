"""Fixtures for API unit tests: in-memory SQLite session factory, AsyncClient."""

import pytest
from httpx import ASGITransport, AsyncClient

from auditlog.main import app


@pytest.fixture
def app_with_overrides(session_factory):
    """App with the database session factory overridden for testing."""
    from auditlog.api import dependencies

    app.dependency_overrides[dependencies.get_db_session_factory] = lambda: session_factory
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def actor_headers():
    return {"X-Actor-ID": "1", "X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
