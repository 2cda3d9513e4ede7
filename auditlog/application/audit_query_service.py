"""Audit query/report service: filtered pages, show, verb lookup, CSV export, dashboard stats."""

import csv
import io
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Callable, List, NoReturn, Optional

from auditlog.application.audit_recorder import AuditRecorder, audited
from auditlog.application.audit_repository import AuditRepository
from auditlog.application.exceptions import QueryFailureError
from auditlog.core.clock import as_utc, utc_now
from auditlog.domain.models.audit_event import (
    STATS_VERBS,
    AuditEvent,
    AuditFilters,
    Page,
    SortOrder,
    StatsSnapshot,
    Verb,
)
from auditlog.domain.validators.audit_validator import validate_pagination

DEFAULT_PER_PAGE = 25
MAX_PER_PAGE = 100
ACTIVE_ACTOR_WINDOW = timedelta(days=7)
ERROR_WINDOW = timedelta(hours=24)
ERROR_MARKER = "error"

CSV_COLUMNS = (
    "id",
    "created_at",
    "actor_id",
    "verb",
    "description",
    "subject_type",
    "subject_id",
    "ip_address",
)


@dataclass(frozen=True)
class CsvExport:
    content: str
    rows: int


def _describe_export(result: CsvExport, arguments) -> str:
    return f"Exported {result.rows} audit events"


def _export_metadata(result: CsvExport, arguments) -> dict:
    filters: Optional[AuditFilters] = arguments.get("filters")
    applied = {}
    if filters is not None:
        applied = {
            "search": filters.search,
            "actor_id": filters.actor_id,
            "verb": filters.verb,
            "date": filters.day.isoformat() if filters.day else None,
            "subject_type": filters.subject_type,
        }
    return {"rows": result.rows, "filters": {k: v for k, v in applied.items() if v is not None}}


def _utc_day_bounds(moment: datetime) -> tuple[datetime, datetime]:
    start = datetime.combine(as_utc(moment).date(), time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class AuditQueryService:
    """
    Read side of the audit log. List failures propagate as QueryFailureError;
    stats failures degrade to an all-zero snapshot so dashboards always render.
    """

    def __init__(
        self,
        repository: AuditRepository,
        logger: logging.Logger,
        recorder: Optional[AuditRecorder] = None,
        clock: Callable[[], datetime] = utc_now,
        default_per_page: int = DEFAULT_PER_PAGE,
        max_per_page: int = MAX_PER_PAGE,
    ) -> None:
        self._repository = repository
        self._logger = logger
        self.recorder = recorder
        self._clock = clock
        self._default_per_page = default_per_page
        self._max_per_page = max_per_page

    async def list_events(
        self,
        filters: Optional[AuditFilters] = None,
        sort: Optional[SortOrder] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> Page[AuditEvent]:
        """Filtered, sorted, 1-indexed page. A page past the end comes back empty."""
        filters = filters or AuditFilters()
        sort = sort or SortOrder()
        per_page = self._default_per_page if per_page is None else per_page
        validate_pagination(page, per_page, self._max_per_page)

        offset = (page - 1) * per_page
        try:
            items, total = await self._repository.find(filters, sort, offset=offset, limit=per_page)
        except Exception as e:
            self._fail("list", e)
        return Page(items=items, total=total, page=page, per_page=per_page)

    async def get_event(self, event_id: uuid.UUID) -> Optional[AuditEvent]:
        try:
            return await self._repository.get(event_id)
        except Exception as e:
            self._fail("get", e)

    async def distinct_verbs(self) -> List[str]:
        """Verbs present in the log, sorted, for the filter dropdown."""
        try:
            return await self._repository.distinct_verbs()
        except Exception as e:
            self._fail("distinct_verbs", e)

    @audited(Verb.EXPORT, describe=_describe_export, metadata=_export_metadata)
    async def export_csv(
        self,
        filters: Optional[AuditFilters] = None,
        sort: Optional[SortOrder] = None,
    ) -> CsvExport:
        """Every matching row as CSV, in list order, without pagination."""
        try:
            items, _ = await self._repository.find(filters or AuditFilters(), sort or SortOrder())
        except Exception as e:
            self._fail("export", e)

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(CSV_COLUMNS)
        for event in items:
            writer.writerow(
                [
                    str(event.id),
                    event.created_at.isoformat(),
                    "" if event.actor_id is None else event.actor_id,
                    event.verb,
                    event.description,
                    event.subject_type or "",
                    event.subject_id or "",
                    event.ip_address or "",
                ]
            )
        return CsvExport(content=buffer.getvalue(), rows=len(items))

    async def stats(self, as_of: Optional[datetime] = None) -> StatsSnapshot:
        """Dashboard counters as of `as_of` (default now). Never raises."""
        now = as_utc(as_of) if as_of is not None else self._clock()
        day_start, day_end = _utc_day_bounds(now)
        try:
            total = await self._repository.count()
            today = await self._repository.count(since=day_start, until=day_end)
            active_actors = await self._repository.count_distinct_actors(
                since=now - ACTIVE_ACTOR_WINDOW
            )
            error_logs = await self._repository.count(
                since=now - ERROR_WINDOW, contains=ERROR_MARKER
            )
            named = {verb: await self._repository.count(verb=verb.value) for verb in STATS_VERBS}
        except Exception as e:
            self._logger.error("audit_stats_failed", extra={"error": str(e)})
            return StatsSnapshot.empty()

        return StatsSnapshot(
            total=total,
            today=today,
            active_actors=active_actors,
            error_logs=error_logs,
            create_count=named[Verb.CREATE],
            update_count=named[Verb.UPDATE],
            delete_count=named[Verb.DELETE],
            login_count=named[Verb.LOGIN],
            # Floored: named buckets are counted independently of the total.
            other_count=max(0, total - sum(named.values())),
        )

    def _fail(self, operation: str, error: Exception) -> NoReturn:
        self._logger.error(
            "audit_query_failed",
            extra={"operation": operation, "error": str(error)},
        )
        raise QueryFailureError(f"Audit log query failed: {error}") from error
