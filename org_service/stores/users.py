"""User lookup accessor (read-only)."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from org_service.models.user import User


async def find_user_by_email(email: str, session: AsyncSession) -> Optional[User]:
    """Case-insensitive lookup of a user by email."""
    result = await session.execute(
        select(User).where(func.lower(User.email) == email.lower())
    )
    return result.scalar_one_or_none()
