# auditlog/infrastructure/database/models.py

import uuid

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB

from auditlog.core.clock import utc_now
from auditlog.infrastructure.database.session import Base


class User(Base):
    """Actor directory owned by the surrounding application. Read here for search only."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)


class AuditEventRecord(Base):
    """ORM model for audit events. Append-only: rows are inserted and bulk-deleted, never updated."""

    __tablename__ = "audit_events"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    actor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    verb = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=False)
    # Advisory pointer only; no foreign key, the subject may since have been deleted.
    subject_type = Column(String(255), nullable=True)
    subject_id = Column(String(64), nullable=True)
    ip_address = Column(String(45), nullable=True)
    metadata_ = Column("metadata", JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)

    __table_args__ = (Index("ix_audit_events_subject", "subject_type", "subject_id"),)
