"""
Organization API endpoints.

POST   /organization                 — Create an org; the caller becomes its admin
GET    /organization/{id}            — Get org details
GET    /organization/user/{userId}   — List orgs a user belongs to
PUT    /organization/{id}            — Rename an org (admins only)
DELETE /organization/{id}            — Delete an org and its memberships (admins only)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from org_service.core.auth import Caller, get_caller
from org_service.core.database import get_session
from org_service.schemas.common import DeleteResult, OkResponse
from org_service.schemas.organizations import (
    OrgCreateRequest,
    OrgResponse,
    OrgUpdateRequest,
)
from org_service.services import lifecycle
from org_service.services import organizations as org_service

router = APIRouter()


@router.post("/organization", response_model=OkResponse[OrgResponse])
async def create_org(
    body: OrgCreateRequest,
    caller: Caller = Depends(get_caller),
    session: AsyncSession = Depends(get_session, scope="function"),
):
    """Create a new organization. The creator becomes an administrator."""
    org, _ = await lifecycle.create_organization(body.name, caller.user_id, session)
    return OkResponse(result=OrgResponse.model_validate(org))


@router.get("/organization/user/{userId}", response_model=OkResponse[list[OrgResponse]])
async def list_user_orgs(
    userId: int,
    session: AsyncSession = Depends(get_session, scope="function"),
):
    """List the organizations a user is a member of."""
    orgs = await org_service.list_user_organizations(userId, session)
    return OkResponse(result=[OrgResponse.model_validate(org) for org in orgs])


@router.get("/organization/{id}", response_model=OkResponse[OrgResponse])
async def get_org(
    id: int,
    session: AsyncSession = Depends(get_session, scope="function"),
):
    org = await org_service.get_organization(id, session)
    return OkResponse(result=OrgResponse.model_validate(org))


@router.put("/organization/{id}", response_model=OkResponse[OrgResponse])
async def update_org(
    id: int,
    body: OrgUpdateRequest,
    caller: Caller = Depends(get_caller),
    session: AsyncSession = Depends(get_session, scope="function"),
):
    """Update the org name (Admin only)."""
    org = await org_service.update_organization(id, caller.user_id, body, session)
    return OkResponse(result=OrgResponse.model_validate(org))


@router.delete("/organization/{id}", response_model=OkResponse[DeleteResult])
async def delete_org(
    id: int,
    caller: Caller = Depends(get_caller),
    session: AsyncSession = Depends(get_session, scope="function"),
):
    """Delete an org together with all of its memberships (Admin only)."""
    await org_service.delete_organization(id, caller.user_id, session)
    return OkResponse(result=DeleteResult())
