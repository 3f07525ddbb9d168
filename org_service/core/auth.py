"""
Caller identification for the organization service.

Bearer tokens are issued by the identity provider. Their signature is always
verified before any claim is trusted:
- against the provider's published JWKS when ``ORG_JWKS_URL`` is set
- against the shared ``ORG_JWT_SECRET`` otherwise
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import jwt
import structlog
from fastapi import Depends, Path
from fastapi.security import APIKeyHeader
from starlette.concurrency import run_in_threadpool

from org_service.core.config import Settings, get_settings
from org_service.core.errors import (
    AuthenticationError,
    ForbiddenError,
    ForbiddenReason,
    UpstreamUnavailableError,
)

log = structlog.get_logger()

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)


# ---------------------------------------------------------------------------
# Token verification
# ---------------------------------------------------------------------------

@lru_cache
def _jwks_client(url: str) -> jwt.PyJWKClient:
    return jwt.PyJWKClient(url, cache_keys=True)


def _signing_key(token: str, settings: Settings):
    if settings.jwks_url:
        return _jwks_client(settings.jwks_url).get_signing_key_from_jwt(token).key
    if settings.jwt_secret:
        return settings.jwt_secret
    raise AuthenticationError("Token verification is not configured")


def decode_token(token: str, settings: Optional[Settings] = None) -> dict:
    """Verify a bearer token and return its claims.

    Raises jwt.PyJWTError on a bad signature, expiry or audience/issuer mismatch.
    """
    settings = settings or get_settings()
    key = _signing_key(token, settings)
    return jwt.decode(
        token,
        key,
        algorithms=settings.jwt_algorithms,
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
        options={"verify_aud": settings.jwt_audience is not None},
    )


def create_token(claims: dict, settings: Optional[Settings] = None) -> str:
    """Sign claims with the shared secret. Local development and tests only."""
    settings = settings or get_settings()
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithms[0])


# ---------------------------------------------------------------------------
# Authentication dependencies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Caller:
    """The identity behind the current request."""

    user_id: int


def caller_from_claims(claims: dict, user_claim: str = "id") -> Caller:
    """Build the Caller from an integer id claim, or a string of digits."""
    raw = claims.get(user_claim)
    if isinstance(raw, str) and raw.strip().isdecimal():
        raw = int(raw)
    if not isinstance(raw, int) or isinstance(raw, bool):
        raise AuthenticationError("Invalid or missing user in token")
    return Caller(user_id=raw)


async def get_caller(
    authorization: Optional[str] = Depends(api_key_header),
) -> Caller:
    """Main authentication dependency: a verified bearer token is required."""
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Authorization header is required")

    token = authorization[7:].strip()
    settings = get_settings()
    try:
        # JWKS lookups may hit the network.
        claims = await run_in_threadpool(decode_token, token, settings)
    except jwt.exceptions.PyJWKClientConnectionError:
        log.error("auth.jwks_unreachable", jwks_url=settings.jwks_url)
        raise UpstreamUnavailableError("Identity provider is unavailable")
    except jwt.PyJWTError as exc:
        log.info("auth.token_rejected", error=type(exc).__name__)
        raise AuthenticationError("Invalid or missing user in token")

    return caller_from_claims(claims, settings.jwt_user_claim)


async def require_self(
    userId: int = Path(...),
    caller: Caller = Depends(get_caller),
) -> Caller:
    """The path's ``userId`` must be the caller's own id."""
    if caller.user_id != userId:
        raise ForbiddenError(
            "You can only access your own memberships",
            reason=ForbiddenReason.NOT_SELF,
        )
    return caller
