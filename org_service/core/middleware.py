"""
Reverse-proxy shared-secret check.

The proxy in front of the service injects ``X-Service-Secret``; requests that
did not come through it are rejected before reaching any route.
"""

from __future__ import annotations

import hmac

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from org_service.core.errors import ForbiddenError, error_body

SERVICE_SECRET_HEADER = "X-Service-Secret"

# Liveness probes and API docs are reachable without the secret.
BYPASS_PATHS = {"/", "/health", "/ready", "/openapi.json"}
BYPASS_PREFIXES = ("/docs", "/redoc")


class ServiceSecretMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, secret: str):
        super().__init__(app)
        self.secret = secret

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if path in BYPASS_PATHS or path.startswith(BYPASS_PREFIXES):
            return await call_next(request)

        provided = request.headers.get(SERVICE_SECRET_HEADER, "")
        if not hmac.compare_digest(provided.encode(), self.secret.encode()):
            error = ForbiddenError("Invalid or missing service secret key")
            return JSONResponse(status_code=error.status_code, content=error_body(error))

        return await call_next(request)
