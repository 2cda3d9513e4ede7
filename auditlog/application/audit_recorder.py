"""Best-effort audit recording. A failing audit store never aborts the caller's action."""

import functools
import inspect
import logging
import uuid
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from auditlog.application.audit_repository import AuditRepository
from auditlog.core.clock import utc_now
from auditlog.core.context import actor_id_ctx, client_ip_ctx, correlation_id_ctx
from auditlog.domain.models.audit_event import AuditEvent
from auditlog.domain.validators.audit_validator import validate_record_arguments


class AuditRecorder:
    """
    Appends audit events through the repository.
    Policy: every write runs in its own transaction and persistence failures are
    logged, never raised. Invalid arguments are programming errors and do raise.
    """

    def __init__(
        self,
        repository: AuditRepository,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], Any] = utc_now,
    ) -> None:
        self._repository = repository
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock

    async def record(
        self,
        *,
        verb: str,
        description: str,
        actor_id: Optional[int] = None,
        subject_type: Optional[str] = None,
        subject_id: Optional[Any] = None,
        metadata: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> Optional[AuditEvent]:
        """Insert exactly one event. Returns the stored event, or None if the store failed."""
        if subject_id is not None:
            subject_id = str(subject_id)
        validate_record_arguments(verb, description, subject_type, subject_id, metadata)

        event = AuditEvent(
            id=uuid.uuid4(),
            verb=verb.strip(),
            description=description.strip(),
            created_at=self._clock(),
            actor_id=actor_id if actor_id is not None else actor_id_ctx.get(),
            subject_type=subject_type,
            subject_id=subject_id,
            ip_address=ip_address or client_ip_ctx.get(),
            metadata=metadata,
        )
        try:
            stored = await self._repository.add(event)
        except Exception as e:
            self._logger.error(
                "audit_record_failed",
                extra={
                    "correlation_id": correlation_id_ctx.get(),
                    "verb": event.verb,
                    "subject_type": event.subject_type,
                    "subject_id": event.subject_id,
                    "error": str(e),
                },
            )
            return None
        self._logger.info(
            "audit_recorded",
            extra={"event_id": str(stored.id), "verb": stored.verb},
        )
        return stored


Describe = Callable[[Any, Mapping[str, Any]], Optional[str]]
Subject = Callable[[Any, Mapping[str, Any]], Optional[Tuple[str, Any]]]
Metadata = Callable[[Any, Mapping[str, Any]], Optional[Dict[str, Any]]]


def audited(
    verb: str,
    describe: Describe,
    subject: Optional[Subject] = None,
    metadata: Optional[Metadata] = None,
):
    """
    Decorate an async method of an object exposing `recorder: AuditRecorder | None`.

    After the method returns, one event is recorded. The callables receive the
    result and the bound call arguments (without self). A `describe` that returns
    None skips recording. If the method raises, nothing is recorded.
    """

    def decorator(func):
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            result = await func(self, *args, **kwargs)
            recorder: Optional[AuditRecorder] = getattr(self, "recorder", None)
            if recorder is None:
                return result

            bound = signature.bind(self, *args, **kwargs)
            bound.apply_defaults()
            arguments = dict(bound.arguments)
            arguments.pop("self", None)

            description = describe(result, arguments)
            if description is None:
                return result
            subject_ref = subject(result, arguments) if subject else None
            subject_type, subject_id = subject_ref if subject_ref else (None, None)
            await recorder.record(
                verb=verb,
                description=description,
                subject_type=subject_type,
                subject_id=subject_id,
                metadata=metadata(result, arguments) if metadata else None,
            )
            return result

        return wrapper

    return decorator
