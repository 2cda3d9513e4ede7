"""Domain schemas. Request/response and validation."""

from auditlog.domain.schemas.audit_event import (
    AuditEventCreateRequest,
    AuditEventPageResponse,
    AuditEventResponse,
    PurgeRequest,
    PurgeResponse,
    StatsResponse,
)

__all__ = [
    "AuditEventCreateRequest",
    "AuditEventPageResponse",
    "AuditEventResponse",
    "PurgeRequest",
    "PurgeResponse",
    "StatsResponse",
]
