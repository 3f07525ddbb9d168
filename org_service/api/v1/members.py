"""
Membership API endpoints.

POST   /member                — Invite a user (by id or email) into an org (admins only)
GET    /member/{id}           — Get a membership
GET    /member/user/{userId}  — The caller's own memberships, with org names
GET    /member/org/{orgId}    — All memberships of an org
PUT    /member/{id}           — Update a membership (admin or the member themself)
DELETE /member/{id}           — Remove a membership (admin or the member themself)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from org_service.core.auth import Caller, get_caller, require_self
from org_service.core.database import get_session
from org_service.schemas.common import DeleteResult, OkResponse
from org_service.schemas.memberships import (
    MemberCreateRequest,
    MemberResponse,
    MemberUpdateRequest,
    UserMemberResponse,
)
from org_service.services import memberships as member_service

router = APIRouter()


@router.post("/member", response_model=OkResponse[MemberResponse])
async def create_member(
    body: MemberCreateRequest,
    caller: Caller = Depends(get_caller),
    session: AsyncSession = Depends(get_session, scope="function"),
):
    """Add a member to an organization. The caller must be one of its admins."""
    membership = await member_service.create_membership(body, caller.user_id, session)
    return OkResponse(result=MemberResponse.model_validate(membership))


@router.get("/member/user/{userId}", response_model=OkResponse[list[UserMemberResponse]])
async def list_user_members(
    userId: int,
    caller: Caller = Depends(require_self),
    session: AsyncSession = Depends(get_session, scope="function"),
):
    rows = await member_service.list_user_memberships(caller.user_id, session)
    return OkResponse(
        result=[
            UserMemberResponse(
                **MemberResponse.model_validate(membership).model_dump(),
                organization_name=org_name,
            )
            for membership, org_name in rows
        ]
    )


@router.get("/member/org/{orgId}", response_model=OkResponse[list[MemberResponse]])
async def list_org_members(
    orgId: int,
    session: AsyncSession = Depends(get_session, scope="function"),
):
    memberships = await member_service.list_organization_memberships(orgId, session)
    return OkResponse(result=[MemberResponse.model_validate(m) for m in memberships])


@router.get("/member/{id}", response_model=OkResponse[MemberResponse])
async def get_member(
    id: int,
    session: AsyncSession = Depends(get_session, scope="function"),
):
    membership = await member_service.get_membership(id, session)
    return OkResponse(result=MemberResponse.model_validate(membership))


@router.put("/member/{id}", response_model=OkResponse[MemberResponse])
async def update_member(
    id: int,
    body: MemberUpdateRequest,
    caller: Caller = Depends(get_caller),
    session: AsyncSession = Depends(get_session, scope="function"),
):
    """Update isAdmin (admins only) or deptName (admin or the member themself)."""
    membership = await member_service.update_membership(id, caller.user_id, body, session)
    return OkResponse(result=MemberResponse.model_validate(membership))


@router.delete("/member/{id}", response_model=OkResponse[DeleteResult])
async def delete_member(
    id: int,
    caller: Caller = Depends(get_caller),
    session: AsyncSession = Depends(get_session, scope="function"),
):
    await member_service.delete_membership(id, caller.user_id, session)
    return OkResponse(result=DeleteResult())
