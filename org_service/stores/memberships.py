"""
Membership store accessor: plain CRUD against ``memberships``.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from org_service.models.membership import Membership


async def insert_membership(
    organization_id: int,
    user_id: int,
    is_admin: bool,
    session: AsyncSession,
) -> Membership:
    """Insert a membership. Raises ``IntegrityError`` on a duplicate (org, user)."""
    membership = Membership(
        organization_id=organization_id,
        user_id=user_id,
        is_admin=is_admin,
    )
    session.add(membership)
    await session.flush()
    return membership


async def find_membership(membership_id: int, session: AsyncSession) -> Optional[Membership]:
    result = await session.execute(
        select(Membership).where(Membership.id == membership_id)
    )
    return result.scalar_one_or_none()


async def find_membership_for(
    user_id: int, organization_id: int, session: AsyncSession
) -> Optional[Membership]:
    result = await session.execute(
        select(Membership).where(
            Membership.user_id == user_id,
            Membership.organization_id == organization_id,
        )
    )
    return result.scalar_one_or_none()


async def list_memberships_by_user(user_id: int, session: AsyncSession) -> list[Membership]:
    result = await session.execute(
        select(Membership).where(Membership.user_id == user_id).order_by(Membership.id)
    )
    return list(result.scalars().all())


async def list_memberships_by_organization(
    organization_id: int, session: AsyncSession
) -> list[Membership]:
    result = await session.execute(
        select(Membership)
        .where(Membership.organization_id == organization_id)
        .order_by(Membership.id)
    )
    return list(result.scalars().all())


async def update_membership(
    membership: Membership, changes: dict, session: AsyncSession
) -> Membership:
    for field, value in changes.items():
        setattr(membership, field, value)
    session.add(membership)
    await session.flush()
    return membership


async def delete_membership(membership: Membership, session: AsyncSession) -> None:
    await session.delete(membership)
    await session.flush()


async def delete_organization_memberships(organization_id: int, session: AsyncSession) -> int:
    """Delete every membership of an organization. Returns the number removed."""
    result = await session.execute(
        delete(Membership).where(Membership.organization_id == organization_id)
    )
    return result.rowcount
