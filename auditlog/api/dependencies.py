"""FastAPI dependency injection: session factory, repository, recorder, services, request context."""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auditlog.application.audit_query_service import AuditQueryService
from auditlog.application.audit_recorder import AuditRecorder
from auditlog.application.audit_repository import AuditRepository
from auditlog.application.retention_service import RetentionService
from auditlog.config.settings import get_settings
from auditlog.infrastructure.database.audit_repository_db import DbAuditRepository
from auditlog.infrastructure.database.session import get_session_factory


def get_db_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory."""
    return get_session_factory()


def get_audit_repository(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_db_session_factory)],
) -> AuditRepository:
    return DbAuditRepository(session_factory)


def get_audit_recorder(
    repository: Annotated[AuditRepository, Depends(get_audit_repository)],
) -> AuditRecorder:
    return AuditRecorder(repository=repository, logger=logging.getLogger("auditlog.recorder"))


def get_audit_query_service(
    repository: Annotated[AuditRepository, Depends(get_audit_repository)],
    recorder: Annotated[AuditRecorder, Depends(get_audit_recorder)],
) -> AuditQueryService:
    """Build AuditQueryService with page sizes from settings."""
    settings = get_settings()
    return AuditQueryService(
        repository=repository,
        logger=logging.getLogger("auditlog.query"),
        recorder=recorder,
        default_per_page=settings.audit_default_page_size,
        max_per_page=settings.audit_max_page_size,
    )


def get_retention_service(
    repository: Annotated[AuditRepository, Depends(get_audit_repository)],
    recorder: Annotated[AuditRecorder, Depends(get_audit_recorder)],
) -> RetentionService:
    return RetentionService(
        repository=repository,
        recorder=recorder,
        logger=logging.getLogger("auditlog.retention"),
    )


def get_actor_id(request: Request) -> Optional[int]:
    """Extract actor_id from request.state (set by middleware)."""
    return getattr(request.state, "actor_id", None)


def get_correlation_id(request: Request) -> str:
    """Extract correlation_id from request.state (set by middleware)."""
    return getattr(request.state, "correlation_id", "") or ""
