"""Organization membership (one user's role in one organization)."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import IntegerIdMixin, utcnow


class Membership(IntegerIdMixin, SQLModel, table=True):
    __tablename__ = "memberships"
    __table_args__ = (
        sa.UniqueConstraint("organization_id", "user_id", name="uq_memberships_org_user"),
    )

    organization_id: int = Field(
        sa_column=sa.Column(
            sa.Integer,
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    # External identity; users are owned by the identity provider.
    user_id: int = Field(nullable=False, index=True)
    invited_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )
    is_admin: bool = Field(default=False, nullable=False)
    dept_name: Optional[str] = None
