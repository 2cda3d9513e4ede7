"""API middleware: correlation ID, actor/client context, request log."""

import json
import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from auditlog.core.context import actor_id_ctx, client_ip_ctx, correlation_id_ctx

logger = logging.getLogger(__name__)

ACTOR_HEADER = "X-Actor-ID"
CORRELATION_HEADER = "X-Correlation-ID"
FORWARDED_FOR_HEADER = "X-Forwarded-For"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class ActorContextMiddleware(BaseHTTPMiddleware):
    """
    Take the authenticated actor from X-Actor-ID (set upstream by the auth layer) and the
    client IP; attach both to request.state and the request-scoped context.
    A non-integer actor id is rejected with 400; a missing one means an anonymous/system caller.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        raw_actor = (request.headers.get(ACTOR_HEADER) or "").strip()
        actor_id = None
        if raw_actor:
            try:
                actor_id = int(raw_actor)
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content={"detail": f"{ACTOR_HEADER} header must be an integer"},
                )
        request.state.actor_id = actor_id
        actor_id_ctx.set(actor_id)

        forwarded = request.headers.get(FORWARDED_FOR_HEADER)
        if forwarded:
            client_ip = forwarded.split(",")[0].strip()
        else:
            client_ip = request.client.host if request.client else None
        request.state.client_ip = client_ip
        client_ip_ctx.set(client_ip)
        return await call_next(request)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """After response: log one structured line (correlation_id, actor_id, client_ip, path, method, status_code)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        request_log = {
            "event": "request_audit",
            "correlation_id": getattr(request.state, "correlation_id", None),
            "actor_id": getattr(request.state, "actor_id", None),
            "client_ip": getattr(request.state, "client_ip", None),
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
        }
        logger.info(json.dumps(request_log))
        return response
