"""Shared fixtures: in-memory SQLite database, session factory, repository."""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from auditlog.infrastructure.database.audit_repository_db import DbAuditRepository
from auditlog.infrastructure.database.models import User
from auditlog.infrastructure.database.session import build_session_factory, init_models


@pytest.fixture
async def engine():
    """One in-memory database per test; StaticPool keeps every session on the same connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db_repository(session_factory):
    return DbAuditRepository(session_factory)


@pytest.fixture
async def users(session_factory):
    """Actor directory used by free-text search."""
    async with session_factory() as session:
        session.add_all(
            [
                User(id=1, name="Alice Martin", email="alice@school.test"),
                User(id=2, name="Bruno Diallo", email="bruno@school.test"),
                User(id=3, name="Chloe Petit", email="registrar@school.test"),
            ]
        )
        await session.commit()
