"""Audit repository protocol. Application layer depends on this; infrastructure implements it."""

import uuid
from datetime import datetime
from typing import List, Optional, Protocol, Tuple

from auditlog.domain.models.audit_event import AuditEvent, AuditFilters, SortOrder


class AuditRepository(Protocol):
    """Append-only store of audit events. Rows are never updated in place."""

    async def add(self, event: AuditEvent) -> AuditEvent:
        """Insert one event in its own transaction and return it as stored."""
        ...

    async def get(self, event_id: uuid.UUID) -> Optional[AuditEvent]:
        ...

    async def find(
        self,
        filters: AuditFilters,
        sort: SortOrder,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Tuple[List[AuditEvent], int]:
        """Return (rows for the requested window, total matching rows)."""
        ...

    async def distinct_verbs(self) -> List[str]:
        ...

    async def count(
        self,
        *,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        verb: Optional[str] = None,
        contains: Optional[str] = None,
    ) -> int:
        """Count rows with since <= created_at < until, exact verb, and
        case-insensitive `contains` in verb or description."""
        ...

    async def count_distinct_actors(self, *, since: datetime) -> int:
        ...

    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete every row with created_at < cutoff atomically; return the number deleted."""
        ...
