"""Pydantic schemas for the audit API. Strict validation, no DB or infrastructure."""

import json
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from auditlog.domain.models.audit_event import AuditEvent, Page, StatsSnapshot


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class AuditEventCreateRequest(BaseModel):
    """Request schema for recording an audit event. Actor and IP come from request context."""

    verb: str = Field(..., min_length=1, max_length=50, description="Action keyword, e.g. create")
    description: str = Field(..., min_length=1, description="Human-readable description")
    subject_type: Optional[str] = Field(None, min_length=1, max_length=255)
    subject_id: Optional[str] = Field(None, min_length=1, max_length=64)
    metadata: Optional[Dict[str, Any]] = Field(None, description="JSON-serializable metadata")

    @field_validator("verb", "description")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("metadata")
    @classmethod
    def metadata_must_be_json_serializable(cls, v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if v is None:
            return v
        try:
            json.dumps(v)
        except (TypeError, ValueError) as e:
            raise ValueError("metadata must be JSON-serializable") from e
        return v

    @model_validator(mode="after")
    def subject_reference_is_paired(self) -> "AuditEventCreateRequest":
        if (self.subject_type is None) != (self.subject_id is None):
            raise ValueError("subject_type and subject_id must be provided together")
        return self


class PurgeRequest(BaseModel):
    """Body for POST /audit-events/purge. Omitted days falls back to the configured retention."""

    days: Optional[int] = Field(None, ge=1, description="Delete events older than this many days")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class AuditEventResponse(BaseModel):
    id: uuid.UUID
    actor_id: Optional[int] = None
    verb: str
    description: str
    subject_type: Optional[str] = None
    subject_id: Optional[str] = None
    ip_address: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_domain(cls, event: AuditEvent) -> "AuditEventResponse":
        return cls.model_validate(event)


class AuditEventPageResponse(BaseModel):
    items: List[AuditEventResponse]
    total: int
    page: int
    per_page: int
    last_page: int
    sort: str
    direction: str

    @classmethod
    def from_page(cls, page: Page[AuditEvent], sort: str, direction: str) -> "AuditEventPageResponse":
        return cls(
            items=[AuditEventResponse.from_domain(e) for e in page.items],
            total=page.total,
            page=page.page,
            per_page=page.per_page,
            last_page=page.last_page,
            sort=sort,
            direction=direction,
        )


class StatsResponse(BaseModel):
    total: int
    today: int
    active_actors: int
    error_logs: int
    create_count: int
    update_count: int
    delete_count: int
    login_count: int
    other_count: int

    model_config = {"from_attributes": True}

    @classmethod
    def from_domain(cls, snapshot: StatsSnapshot) -> "StatsResponse":
        return cls.model_validate(snapshot)


class PurgeResponse(BaseModel):
    deleted: int
    days: int
