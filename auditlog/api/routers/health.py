# auditlog/api/routers/health.py

from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from auditlog.api.dependencies import get_actor_id, get_correlation_id
from auditlog.config.settings import get_settings

router = APIRouter()


@router.get("/health")
async def health(
    actor_id: Annotated[Optional[int], Depends(get_actor_id)],
    correlation_id: Annotated[str, Depends(get_correlation_id)],
):
    """Health check with actor and correlation ID from request state."""
    settings = get_settings()
    return {
        "status": "ok",
        "actor_id": actor_id,
        "correlation_id": correlation_id,
        "environment": settings.environment,
        "version": settings.version,
    }
