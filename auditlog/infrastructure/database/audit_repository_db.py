"""DB-backed audit repository. One session (and transaction) per operation."""

import uuid
from datetime import datetime, time, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auditlog.core.clock import as_utc
from auditlog.domain.models.audit_event import AuditEvent, AuditFilters, SortOrder
from auditlog.infrastructure.database.models import AuditEventRecord, User

_SORT_COLUMNS = {
    "id": AuditEventRecord.id,
    "created_at": AuditEventRecord.created_at,
    "actor_id": AuditEventRecord.actor_id,
    "verb": AuditEventRecord.verb,
    "subject_type": AuditEventRecord.subject_type,
    "description": AuditEventRecord.description,
    "ip_address": AuditEventRecord.ip_address,
}


def _to_domain(orm: AuditEventRecord) -> AuditEvent:
    return AuditEvent(
        id=orm.id,
        verb=orm.verb,
        description=orm.description,
        created_at=as_utc(orm.created_at),
        actor_id=orm.actor_id,
        subject_type=orm.subject_type,
        subject_id=orm.subject_id,
        ip_address=orm.ip_address,
        metadata=orm.metadata_,
    )


def _conditions(filters: AuditFilters) -> list:
    conditions = []
    if filters.search:
        term = filters.search
        matching_actors = select(User.id).where(
            or_(
                User.name.icontains(term, autoescape=True),
                User.email.icontains(term, autoescape=True),
            )
        )
        conditions.append(
            or_(
                AuditEventRecord.description.icontains(term, autoescape=True),
                AuditEventRecord.verb.icontains(term, autoescape=True),
                AuditEventRecord.ip_address.icontains(term, autoescape=True),
                AuditEventRecord.actor_id.in_(matching_actors),
            )
        )
    if filters.actor_id is not None:
        conditions.append(AuditEventRecord.actor_id == filters.actor_id)
    if filters.verb:
        conditions.append(AuditEventRecord.verb == filters.verb)
    if filters.day is not None:
        start = datetime.combine(filters.day, time.min, tzinfo=timezone.utc)
        conditions.append(AuditEventRecord.created_at >= start)
        conditions.append(AuditEventRecord.created_at < start + timedelta(days=1))
    if filters.subject_type:
        conditions.append(AuditEventRecord.subject_type == filters.subject_type)
    return conditions


class DbAuditRepository:
    """Persists audit events with SQLAlchemy. Implements AuditRepository protocol."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add(self, event: AuditEvent) -> AuditEvent:
        orm = AuditEventRecord(
            id=event.id,
            actor_id=event.actor_id,
            verb=event.verb,
            description=event.description,
            subject_type=event.subject_type,
            subject_id=event.subject_id,
            ip_address=event.ip_address,
            metadata_=event.metadata,
            created_at=event.created_at,
        )
        async with self._session_factory() as session:
            session.add(orm)
            await session.commit()
        return _to_domain(orm)

    async def get(self, event_id: uuid.UUID) -> Optional[AuditEvent]:
        async with self._session_factory() as session:
            orm = await session.get(AuditEventRecord, event_id)
            return _to_domain(orm) if orm is not None else None

    async def find(
        self,
        filters: AuditFilters,
        sort: SortOrder,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Tuple[List[AuditEvent], int]:
        conditions = _conditions(filters)
        column = _SORT_COLUMNS[sort.column]
        order = column.desc() if sort.descending else column.asc()
        tiebreak = AuditEventRecord.id.desc() if sort.descending else AuditEventRecord.id.asc()

        stmt = select(AuditEventRecord).where(*conditions).order_by(order, tiebreak)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        count_stmt = select(func.count()).select_from(AuditEventRecord).where(*conditions)

        async with self._session_factory() as session:
            total = (await session.execute(count_stmt)).scalar_one()
            rows = (await session.execute(stmt)).scalars().all()
        return [_to_domain(orm) for orm in rows], total

    async def distinct_verbs(self) -> List[str]:
        stmt = select(AuditEventRecord.verb).distinct().order_by(AuditEventRecord.verb)
        async with self._session_factory() as session:
            return list((await session.execute(stmt)).scalars().all())

    async def count(
        self,
        *,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        verb: Optional[str] = None,
        contains: Optional[str] = None,
    ) -> int:
        stmt = select(func.count()).select_from(AuditEventRecord)
        if since is not None:
            stmt = stmt.where(AuditEventRecord.created_at >= since)
        if until is not None:
            stmt = stmt.where(AuditEventRecord.created_at < until)
        if verb is not None:
            stmt = stmt.where(AuditEventRecord.verb == verb)
        if contains is not None:
            stmt = stmt.where(
                or_(
                    AuditEventRecord.verb.icontains(contains, autoescape=True),
                    AuditEventRecord.description.icontains(contains, autoescape=True),
                )
            )
        async with self._session_factory() as session:
            return (await session.execute(stmt)).scalar_one()

    async def count_distinct_actors(self, *, since: datetime) -> int:
        stmt = select(func.count(AuditEventRecord.actor_id.distinct())).where(
            AuditEventRecord.actor_id.is_not(None),
            AuditEventRecord.created_at >= since,
        )
        async with self._session_factory() as session:
            return (await session.execute(stmt)).scalar_one()

    async def delete_older_than(self, cutoff: datetime) -> int:
        """Single DELETE in one transaction; a failure rolls back and deletes nothing."""
        stmt = (
            delete(AuditEventRecord)
            .where(AuditEventRecord.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(stmt)
        return result.rowcount
