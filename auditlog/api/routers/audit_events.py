"""Audit events API router: list, stats, verbs, export, show, record, purge."""

import datetime
import uuid
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from auditlog.api.dependencies import (
    get_audit_query_service,
    get_audit_recorder,
    get_retention_service,
)
from auditlog.application.audit_query_service import AuditQueryService
from auditlog.application.audit_recorder import AuditRecorder
from auditlog.application.retention_service import RetentionService
from auditlog.config.settings import get_settings
from auditlog.core.clock import utc_now
from auditlog.domain.models.audit_event import AuditFilters, SortDirection, SortOrder, Verb
from auditlog.domain.schemas.audit_event import (
    AuditEventCreateRequest,
    AuditEventPageResponse,
    AuditEventResponse,
    PurgeRequest,
    PurgeResponse,
    StatsResponse,
)

router = APIRouter()

SUBJECT_TYPE = "AuditEvent"


def _filters(
    search: Optional[str] = None,
    actor_id: Optional[int] = None,
    verb: Optional[str] = None,
    date: Optional[datetime.date] = None,
    subject_type: Optional[str] = None,
) -> AuditFilters:
    """Query-string filters shared by list and export."""
    return AuditFilters(
        search=search,
        actor_id=actor_id,
        verb=verb,
        day=date,
        subject_type=subject_type,
    )


def _sort(
    sort: str = "created_at",
    direction: SortDirection = SortDirection.DESC,
) -> SortOrder:
    return SortOrder(column=sort, direction=direction)


@router.get("/", response_model=AuditEventPageResponse)
async def list_audit_events(
    filters: Annotated[AuditFilters, Depends(_filters)],
    sort_order: Annotated[SortOrder, Depends(_sort)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[Optional[int], Query(ge=1)] = None,
    recorder: Annotated[AuditRecorder, Depends(get_audit_recorder)] = ...,
    query_service: Annotated[AuditQueryService, Depends(get_audit_query_service)] = ...,
):
    """Filtered, sorted, paginated activity log. Records the page access first."""
    await recorder.record(verb=Verb.ACCESS, description="Accessed the activity log")
    result = await query_service.list_events(filters, sort_order, page=page, per_page=per_page)
    return AuditEventPageResponse.from_page(
        result, sort=sort_order.column, direction=sort_order.direction.value
    )


@router.get("/stats", response_model=StatsResponse)
async def audit_stats(
    query_service: Annotated[AuditQueryService, Depends(get_audit_query_service)] = ...,
):
    """Dashboard counters. Degrades to zeros when the store is unavailable."""
    return StatsResponse.from_domain(await query_service.stats())


@router.get("/verbs", response_model=list[str])
async def audit_verbs(
    query_service: Annotated[AuditQueryService, Depends(get_audit_query_service)] = ...,
):
    return await query_service.distinct_verbs()


@router.get("/export")
async def export_audit_events(
    filters: Annotated[AuditFilters, Depends(_filters)],
    sort_order: Annotated[SortOrder, Depends(_sort)],
    query_service: Annotated[AuditQueryService, Depends(get_audit_query_service)] = ...,
):
    """CSV of every matching event. The export itself is recorded."""
    export = await query_service.export_csv(filters, sort_order)
    filename = f"audit-events-{utc_now():%Y%m%d-%H%M%S}.csv"
    return Response(
        content=export.content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{event_id}", response_model=AuditEventResponse)
async def get_audit_event(
    event_id: uuid.UUID,
    recorder: Annotated[AuditRecorder, Depends(get_audit_recorder)] = ...,
    query_service: Annotated[AuditQueryService, Depends(get_audit_query_service)] = ...,
):
    event = await query_service.get_event(event_id)
    if event is None:
        return JSONResponse(status_code=404, content={"detail": "Audit event not found"})
    await recorder.record(
        verb=Verb.VIEW,
        description="Viewed audit event details",
        subject_type=SUBJECT_TYPE,
        subject_id=event.id,
    )
    return AuditEventResponse.from_domain(event)


@router.post("/", response_model=AuditEventResponse, status_code=status.HTTP_201_CREATED)
async def record_audit_event(
    body: AuditEventCreateRequest,
    recorder: Annotated[AuditRecorder, Depends(get_audit_recorder)] = ...,
):
    """Record one event for the current actor. 503 when the store rejected the write."""
    event = await recorder.record(
        verb=body.verb,
        description=body.description,
        subject_type=body.subject_type,
        subject_id=body.subject_id,
        metadata=body.metadata,
    )
    if event is None:
        return JSONResponse(
            status_code=503,
            content={"detail": "Audit event could not be recorded"},
        )
    return AuditEventResponse.from_domain(event)


@router.post("/purge", response_model=PurgeResponse)
async def purge_audit_events(
    body: Optional[PurgeRequest] = None,
    retention_service: Annotated[RetentionService, Depends(get_retention_service)] = ...,
):
    """Delete events older than `days` (default: configured retention)."""
    days = body.days if body is not None and body.days is not None else get_settings().audit_retention_days
    deleted = await retention_service.purge_older_than(days)
    return PurgeResponse(deleted=deleted, days=days)
