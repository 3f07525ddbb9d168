"""
Organization request/response schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field

from .common import CamelModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class OrgCreateRequest(CamelModel):
    # "Orgname" is what older clients send.
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        validation_alias=AliasChoices("name", "Orgname"),
        description="Organization display name",
    )


class OrgUpdateRequest(CamelModel):
    """Only the name is mutable."""

    name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=200,
        validation_alias=AliasChoices("name", "Orgname"),
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class OrgResponse(CamelModel):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime
