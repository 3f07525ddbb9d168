"""
Organization Service API Server

Entry point for the FastAPI application.
"""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from org_service.api.v1 import router as api_v1_router
from org_service.core.config import Settings, get_settings
from org_service.core.database import get_session, ping
from org_service.core.errors import (
    OrgServiceError,
    UpstreamUnavailableError,
    ValidationError,
    error_body,
)
from org_service.core.logging import configure_logging
from org_service.core.middleware import SERVICE_SECRET_HEADER, ServiceSecretMiddleware

log = structlog.get_logger()


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to one status code and one envelope shape."""

    @app.exception_handler(OrgServiceError)
    async def handle_service_error(request: Request, exc: OrgServiceError):
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        error = ValidationError(_validation_message(exc))
        return JSONResponse(status_code=error.status_code, content=error_body(error))

    @app.exception_handler(SQLAlchemyError)
    async def handle_storage_error(request: Request, exc: SQLAlchemyError):
        log.error("storage.error", path=request.url.path, error=type(exc).__name__, exc_info=exc)
        error = UpstreamUnavailableError("Storage is unavailable")
        return JSONResponse(status_code=error.status_code, content=error_body(error))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format, service="org-service")

    app = FastAPI(
        title="Organization Service",
        description="Organization and member management service.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Middleware: the last one added is outermost
    if settings.service_secret:
        app.add_middleware(ServiceSecretMiddleware, secret=settings.service_secret)
    else:
        log.warning("app.service_secret_disabled")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", SERVICE_SECRET_HEADER],
    )

    register_exception_handlers(app)

    app.include_router(api_v1_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for liveness probes."""
        return {"status": "ok", "service": "OrganizationService"}

    @app.get("/ready", tags=["System"])
    async def readiness_check(session: AsyncSession = Depends(get_session, scope="function")):
        """Readiness check: the store must answer."""
        await ping(session)
        return {"status": "ready"}

    @app.on_event("startup")
    async def on_startup():
        log.info("app.starting", api_prefix=settings.api_prefix)

    return app


app = create_app()


def run() -> None:
    """CLI entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "org_service.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        reload=settings.debug,
    )
