"""
One-time backfill of the legacy `activity_logs` table into `audit_events`.

The legacy table carries two generations of column names (action/activity_type,
description/activity_description, loggable_*/subject_*, additional_data). They are
resolved here, once, so no read path ever needs a fallback.
"""

import json
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import MetaData, Table, insert, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auditlog.core.clock import as_utc, utc_now
from auditlog.infrastructure.database.models import AuditEventRecord

logger = logging.getLogger(__name__)

LEGACY_TABLE = "activity_logs"


def _first(row: Mapping[str, Any], *keys: str) -> Any:
    """First non-empty value among keys; newer column names are listed first."""
    for key in keys:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return None


def _parse_metadata(value: Any) -> Optional[Dict[str, Any]]:
    if value is None or value == "":
        return None
    if isinstance(value, (bytes, str)):
        value = json.loads(value)
    return value if isinstance(value, dict) else {"value": value}


def _parse_timestamp(value: Any) -> datetime:
    if value is None:
        return utc_now()
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return as_utc(value)


def canonicalize_legacy_row(row: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """Map one legacy row to AuditEventRecord attribute values. Returns None if it has no verb or description."""
    verb = _first(row, "activity_type", "action")
    description = _first(row, "activity_description", "description")
    if verb is None or description is None:
        return None

    subject_type = _first(row, "subject_type", "loggable_type")
    subject_id = _first(row, "subject_id", "loggable_id")
    if subject_type is None or subject_id is None:
        subject_type = subject_id = None

    return {
        "id": uuid.uuid4(),
        "actor_id": row.get("user_id"),
        "verb": str(verb).strip()[:50],
        "description": str(description),
        "subject_type": subject_type,
        "subject_id": None if subject_id is None else str(subject_id),
        "ip_address": row.get("ip_address"),
        "metadata_": _parse_metadata(_first(row, "additional_data", "metadata")),
        "created_at": _parse_timestamp(row.get("created_at")),
    }


async def backfill_legacy_activity_logs(
    session_factory: async_sessionmaker[AsyncSession],
    legacy_table: str = LEGACY_TABLE,
) -> int:
    """Copy every usable legacy row into audit_events in one transaction. Returns rows copied."""
    async with session_factory() as session:
        async with session.begin():
            conn = await session.connection()
            table = await conn.run_sync(
                lambda sync_conn: Table(legacy_table, MetaData(), autoload_with=sync_conn)
            )
            rows = (await session.execute(select(table))).mappings().all()

            values = [canonicalize_legacy_row(row) for row in rows]
            usable = [v for v in values if v is not None]
            if usable:
                await session.execute(insert(AuditEventRecord), usable)

    logger.info(
        "legacy_backfill_completed",
        extra={
            "legacy_table": legacy_table,
            "copied": len(usable),
            "skipped": len(values) - len(usable),
        },
    )
    return len(usable)
