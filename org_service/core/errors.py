"""
Domain error taxonomy and the single error-to-status mapping.

Services raise these; the request boundary never builds status codes itself.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ForbiddenReason(str, Enum):
    NOT_MEMBER = "not_member"
    NOT_ADMIN = "not_admin"
    NOT_SELF = "not_self"


class OrgServiceError(Exception):
    """Base exception for organization service errors."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(OrgServiceError):
    """Missing or malformed input."""

    status_code = 400
    code = "VALIDATION_ERROR"


class AuthenticationError(OrgServiceError):
    """The caller could not be identified from the bearer token."""

    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(OrgServiceError):
    """An authorization rule was violated. ``reason`` names which one."""

    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str, reason: Optional[ForbiddenReason] = None):
        self.reason = reason
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.reason is not None:
            data["reason"] = self.reason.value
        return data


class NotFoundError(OrgServiceError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(OrgServiceError):
    """Duplicate membership."""

    status_code = 409
    code = "CONFLICT"


class UpstreamUnavailableError(OrgServiceError):
    """Storage or lookup collaborator failure."""

    status_code = 500
    code = "UPSTREAM_UNAVAILABLE"


def error_body(error: OrgServiceError) -> dict:
    """Response envelope for a failed request."""
    return {"ok": False, "error": error.to_dict()}
