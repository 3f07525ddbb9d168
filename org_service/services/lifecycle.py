"""
Organization lifecycle: an organization and its founding admin are created
together or not at all.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from org_service.models.membership import Membership
from org_service.models.organization import Organization
from org_service.stores import memberships as membership_store
from org_service.stores import organizations as org_store

log = structlog.get_logger()


async def create_organization(
    name: str, creator_user_id: int, session: AsyncSession
) -> tuple[Organization, Membership]:
    """Create an org and make the creator its admin.

    Both inserts share the caller's transaction: if the membership insert
    raises, the session is rolled back and the organization row with it.
    """
    org = await org_store.insert_organization(name, session)
    membership = await membership_store.insert_membership(
        organization_id=org.id,
        user_id=creator_user_id,
        is_admin=True,
        session=session,
    )

    log.info("org.created", org_id=org.id, creator=creator_user_id, member_id=membership.id)
    return org, membership
