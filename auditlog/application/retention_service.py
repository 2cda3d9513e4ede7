"""Retention purge: atomic bulk deletion of old audit events, logged as its own event."""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from auditlog.application.audit_recorder import AuditRecorder, audited
from auditlog.application.audit_repository import AuditRepository
from auditlog.application.exceptions import PurgeFailureError
from auditlog.core.clock import utc_now
from auditlog.domain.models.audit_event import Verb
from auditlog.domain.validators.audit_validator import validate_retention_days


def _describe_purge(deleted: int, arguments) -> str:
    return f"Purged {deleted} audit events older than {arguments['days']} days"


def _purge_metadata(deleted: int, arguments) -> dict:
    return {"deleted": deleted, "days": arguments["days"]}


class RetentionService:
    """
    Deletes events older than a threshold in one statement. The bulk_delete event is
    written after the delete commits, so it is never removed by the purge that made it.
    """

    def __init__(
        self,
        repository: AuditRepository,
        recorder: Optional[AuditRecorder],
        logger: logging.Logger,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repository = repository
        self.recorder = recorder
        self._logger = logger
        self._clock = clock

    @audited(Verb.BULK_DELETE, describe=_describe_purge, metadata=_purge_metadata)
    async def purge_older_than(self, days: int) -> int:
        """Delete rows with created_at < now - days. All-or-nothing; returns the count."""
        validate_retention_days(days)
        cutoff = self._clock() - timedelta(days=days)
        try:
            deleted = await self._repository.delete_older_than(cutoff)
        except Exception as e:
            self._logger.error(
                "audit_purge_failed",
                extra={"days": days, "cutoff": cutoff.isoformat(), "error": str(e)},
            )
            raise PurgeFailureError(f"Audit purge failed; no events were deleted: {e}") from e

        self._logger.info(
            "audit_purge_completed",
            extra={"days": days, "cutoff": cutoff.isoformat(), "deleted": deleted},
        )
        return deleted
