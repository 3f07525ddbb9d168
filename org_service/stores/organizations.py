"""
Organization store accessor: plain CRUD against ``organizations``.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from org_service.models.base import utcnow
from org_service.models.organization import Organization


async def insert_organization(name: str, session: AsyncSession) -> Organization:
    org = Organization(name=name)
    session.add(org)
    await session.flush()
    return org


async def find_organization(org_id: int, session: AsyncSession) -> Optional[Organization]:
    result = await session.execute(
        select(Organization).where(Organization.id == org_id)
    )
    return result.scalar_one_or_none()


async def update_organization(
    org: Organization, changes: dict, session: AsyncSession
) -> Organization:
    """Apply ``changes`` and stamp ``updated_at``."""
    for field, value in changes.items():
        setattr(org, field, value)
    org.updated_at = utcnow()
    session.add(org)
    await session.flush()
    return org


async def delete_organization(org: Organization, session: AsyncSession) -> None:
    await session.delete(org)
    await session.flush()
