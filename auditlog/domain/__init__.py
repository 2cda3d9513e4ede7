"""Domain layer: models, schemas, validators, exceptions. Pure business logic only."""

from auditlog.domain.exceptions import (
    DomainError,
    DomainValidationError,
    InvalidMetadataError,
    InvalidSortError,
    InvalidSubjectReferenceError,
)
from auditlog.domain.models import (
    AuditEvent,
    AuditFilters,
    Page,
    SortDirection,
    SortOrder,
    StatsSnapshot,
    Verb,
)

__all__ = [
    "AuditEvent",
    "AuditFilters",
    "DomainError",
    "DomainValidationError",
    "InvalidMetadataError",
    "InvalidSortError",
    "InvalidSubjectReferenceError",
    "Page",
    "SortDirection",
    "SortOrder",
    "StatsSnapshot",
    "Verb",
]
