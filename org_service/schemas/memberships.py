"""Membership request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, EmailStr, Field, model_validator

from .common import CamelModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class MemberCreateRequest(CamelModel):
    """Invite a user into an organization, by user id or by email.

    The PascalCase keys are what older clients send.
    """

    organization_id: int = Field(
        ..., validation_alias=AliasChoices("organizationId", "OrganizationId")
    )
    user_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("userId", "UserId")
    )
    email: Optional[EmailStr] = None
    is_admin: bool = False

    @model_validator(mode="after")
    def _one_target(self) -> "MemberCreateRequest":
        if (self.user_id is None) == (self.email is None):
            raise ValueError("Exactly one of userId or email is required")
        return self


class MemberUpdateRequest(CamelModel):
    is_admin: Optional[bool] = None
    dept_name: Optional[str] = Field(
        default=None,
        max_length=200,
        validation_alias=AliasChoices("deptName", "DeptName"),
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class MemberResponse(CamelModel):
    id: int
    organization_id: int
    user_id: int
    invited_at: datetime
    is_admin: bool
    dept_name: Optional[str] = None


class UserMemberResponse(MemberResponse):
    """A membership enriched with its organization's display name."""

    organization_name: Optional[str] = None
