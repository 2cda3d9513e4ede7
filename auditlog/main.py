# auditlog/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from auditlog.api.middleware import (
    ActorContextMiddleware,
    CorrelationIdMiddleware,
    RequestLogMiddleware,
)
from auditlog.api.routers import audit_events, health
from auditlog.application.exceptions import (
    ApplicationError,
    PurgeFailureError,
    QueryFailureError,
)
from auditlog.config.logging import configure_logging
from auditlog.config.settings import get_settings
from auditlog.domain.exceptions import DomainError, DomainValidationError
from auditlog.infrastructure.database.session import get_engine, init_models

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_schema:
        await init_models(get_engine())
    yield
    await get_engine().dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> ActorContext -> RequestLog.
app.add_middleware(RequestLogMiddleware)
app.add_middleware(ActorContextMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(DomainValidationError)
async def domain_validation_error_handler(request, exc: DomainValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(QueryFailureError)
async def query_failure_error_handler(request, exc: QueryFailureError):
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.exception_handler(PurgeFailureError)
async def purge_failure_error_handler(request, exc: PurgeFailureError):
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /audit-events
app.include_router(health.router)
app.include_router(audit_events.router, prefix="/audit-events")
