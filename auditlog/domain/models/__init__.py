"""Domain models. Pure business entities."""

from auditlog.domain.models.audit_event import (
    STATS_VERBS,
    AuditEvent,
    AuditFilters,
    Page,
    SortDirection,
    SortOrder,
    StatsSnapshot,
    Verb,
)

__all__ = [
    "STATS_VERBS",
    "AuditEvent",
    "AuditFilters",
    "Page",
    "SortDirection",
    "SortOrder",
    "StatsSnapshot",
    "Verb",
]
