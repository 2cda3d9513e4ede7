# Application layer: services that orchestrate domain and infrastructure.

from auditlog.application.audit_query_service import AuditQueryService, CsvExport
from auditlog.application.audit_recorder import AuditRecorder, audited
from auditlog.application.audit_repository import AuditRepository
from auditlog.application.exceptions import (
    ApplicationError,
    PurgeFailureError,
    QueryFailureError,
)
from auditlog.application.retention_service import RetentionService

__all__ = [
    "AuditQueryService",
    "AuditRecorder",
    "AuditRepository",
    "ApplicationError",
    "CsvExport",
    "PurgeFailureError",
    "QueryFailureError",
    "RetentionService",
    "audited",
]
