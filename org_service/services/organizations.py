"""
Organization service — authorization-aware reads and mutations.

Every mutation checks, in this order: the organization exists, the requester
is a member of it, the requester's membership is admin. The order decides
which error a caller sees and must not change.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from org_service.core.errors import ForbiddenError, ForbiddenReason, NotFoundError
from org_service.models.membership import Membership
from org_service.models.organization import Organization
from org_service.schemas.organizations import OrgUpdateRequest
from org_service.stores import memberships as membership_store
from org_service.stores import organizations as org_store

log = structlog.get_logger()


async def get_organization(org_id: int, session: AsyncSession) -> Organization:
    """Get an org by id; raises NotFoundError if absent. Reads are unrestricted."""
    org = await org_store.find_organization(org_id, session)
    if not org:
        raise NotFoundError("Organization not found")
    return org


async def list_user_organizations(
    user_id: int, session: AsyncSession
) -> list[Organization]:
    """List the orgs a user belongs to, in membership order.

    Memberships pointing at an org that no longer resolves are skipped.
    """
    memberships = await membership_store.list_memberships_by_user(user_id, session)
    orgs: list[Organization] = []
    for membership in memberships:
        org = await org_store.find_organization(membership.organization_id, session)
        if org is None:
            log.warning(
                "org.list_missing_org",
                user_id=user_id,
                org_id=membership.organization_id,
                member_id=membership.id,
            )
            continue
        orgs.append(org)
    return orgs


async def _require_org_admin(
    org_id: int, requesting_user_id: int, session: AsyncSession
) -> tuple[Organization, Membership]:
    org = await get_organization(org_id, session)

    membership = await membership_store.find_membership_for(requesting_user_id, org_id, session)
    if not membership:
        raise ForbiddenError(
            "User is not a member of this organization",
            reason=ForbiddenReason.NOT_MEMBER,
        )
    if not membership.is_admin:
        raise ForbiddenError(
            "User is not an admin of this organization",
            reason=ForbiddenReason.NOT_ADMIN,
        )
    return org, membership


async def update_organization(
    org_id: int,
    requesting_user_id: int,
    req: OrgUpdateRequest,
    session: AsyncSession,
) -> Organization:
    """Rename an org (admins only). ``updated_at`` is stamped even for an empty patch."""
    org, _ = await _require_org_admin(org_id, requesting_user_id, session)

    changes = {}
    if req.name is not None:
        changes["name"] = req.name
    org = await org_store.update_organization(org, changes, session)

    log.info("org.updated", org_id=org.id, by=requesting_user_id, fields=sorted(changes))
    return org


async def delete_organization(
    org_id: int, requesting_user_id: int, session: AsyncSession
) -> None:
    """Delete an org and all of its memberships (admins only)."""
    org, _ = await _require_org_admin(org_id, requesting_user_id, session)

    removed = await membership_store.delete_organization_memberships(org.id, session)
    await org_store.delete_organization(org, session)

    log.info("org.deleted", org_id=org_id, by=requesting_user_id, memberships_removed=removed)
