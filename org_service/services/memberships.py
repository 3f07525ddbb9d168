"""
Membership service — business logic for invitations and membership edits.

A membership may be changed or removed by an admin of its organization or by
the member themself, and by no one else. Being an admin of a different
organization grants nothing.
"""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from org_service.core.errors import (
    ConflictError,
    ForbiddenError,
    ForbiddenReason,
    NotFoundError,
)
from org_service.models.membership import Membership
from org_service.schemas.memberships import MemberCreateRequest, MemberUpdateRequest
from org_service.stores import memberships as membership_store
from org_service.stores import organizations as org_store
from org_service.stores import users as user_store

log = structlog.get_logger()

ALREADY_MEMBER = "User is already a member of this organization"


async def create_membership(
    req: MemberCreateRequest,
    requesting_admin_id: int,
    session: AsyncSession,
) -> Membership:
    """Add a user to an org on behalf of one of its admins."""
    org = await org_store.find_organization(req.organization_id, session)
    if not org:
        raise NotFoundError("This organization doesn't exist")

    admin_membership = await membership_store.find_membership_for(
        requesting_admin_id, org.id, session
    )
    if not admin_membership:
        raise ForbiddenError(
            "Admin user not found in this organization",
            reason=ForbiddenReason.NOT_MEMBER,
        )
    if not admin_membership.is_admin:
        raise ForbiddenError(
            "User is not an admin of this organization",
            reason=ForbiddenReason.NOT_ADMIN,
        )

    target_user_id: Optional[int] = req.user_id
    if req.email is not None:
        user = await user_store.find_user_by_email(req.email, session)
        if not user:
            raise NotFoundError("User with this email does not exist")
        target_user_id = user.id

    if await membership_store.find_membership_for(target_user_id, org.id, session):
        raise ConflictError(ALREADY_MEMBER)

    try:
        membership = await membership_store.insert_membership(
            organization_id=org.id,
            user_id=target_user_id,
            is_admin=req.is_admin,
            session=session,
        )
    except IntegrityError:
        # Lost a race with a concurrent invite; the unique constraint decided.
        raise ConflictError(ALREADY_MEMBER)

    log.info(
        "member.created",
        member_id=membership.id,
        org_id=org.id,
        user_id=target_user_id,
        is_admin=membership.is_admin,
        by=requesting_admin_id,
    )
    return membership


async def get_membership(membership_id: int, session: AsyncSession) -> Membership:
    membership = await membership_store.find_membership(membership_id, session)
    if not membership:
        raise NotFoundError("Member not found")
    return membership


async def list_user_memberships(
    user_id: int, session: AsyncSession
) -> list[tuple[Membership, Optional[str]]]:
    """All memberships of a user, each paired with its org's name (None if unresolved)."""
    memberships = await membership_store.list_memberships_by_user(user_id, session)
    rows = []
    for membership in memberships:
        org = await org_store.find_organization(membership.organization_id, session)
        if org is None:
            log.warning(
                "member.list_missing_org",
                member_id=membership.id,
                org_id=membership.organization_id,
            )
        rows.append((membership, org.name if org else None))
    return rows


async def list_organization_memberships(
    org_id: int, session: AsyncSession
) -> list[Membership]:
    return await membership_store.list_memberships_by_organization(org_id, session)


async def _authorize_mutation(
    membership_id: int, requesting_user_id: int, session: AsyncSession
) -> tuple[Membership, Membership]:
    """Return (target, requester's membership) if the requester may change the target."""
    target = await get_membership(membership_id, session)

    requester = await membership_store.find_membership_for(
        requesting_user_id, target.organization_id, session
    )
    if not requester:
        raise ForbiddenError(
            "Requesting user is not a member of this organization",
            reason=ForbiddenReason.NOT_MEMBER,
        )

    if not requester.is_admin and requesting_user_id != target.user_id:
        raise ForbiddenError(
            "Only admins or the account owner can modify this membership",
            reason=ForbiddenReason.NOT_SELF,
        )
    return target, requester


async def update_membership(
    membership_id: int,
    requesting_user_id: int,
    req: MemberUpdateRequest,
    session: AsyncSession,
) -> Membership:
    """Change ``is_admin`` and/or ``dept_name``. Admin rights are granted by admins only."""
    target, requester = await _authorize_mutation(membership_id, requesting_user_id, session)

    changes = req.model_dump(exclude_unset=True)
    if "is_admin" in changes:
        if changes["is_admin"] is None:
            del changes["is_admin"]
        elif not requester.is_admin:
            raise ForbiddenError(
                "Only admins can change admin rights",
                reason=ForbiddenReason.NOT_ADMIN,
            )

    membership = await membership_store.update_membership(target, changes, session)

    log.info(
        "member.updated",
        member_id=membership.id,
        org_id=membership.organization_id,
        by=requesting_user_id,
        fields=sorted(changes),
    )
    return membership


async def delete_membership(
    membership_id: int, requesting_user_id: int, session: AsyncSession
) -> None:
    target, _ = await _authorize_mutation(membership_id, requesting_user_id, session)
    org_id = target.organization_id

    await membership_store.delete_membership(target, session)
    log.info(
        "member.deleted",
        member_id=membership_id,
        org_id=org_id,
        by=requesting_user_id,
    )
