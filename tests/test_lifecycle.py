"""
Tests for organization creation: the organization and its founding admin
membership exist together or not at all.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from org_service.main import app as fastapi_app
from org_service.models.membership import Membership
from org_service.models.organization import Organization
from org_service.services.lifecycle import create_organization

from conftest import API, auth


async def test_creator_becomes_admin(session):
    org, membership = await create_organization("Acme", 10, session)

    assert org.id is not None
    assert org.name == "Acme"
    assert membership.organization_id == org.id
    assert membership.user_id == 10
    assert membership.is_admin is True
    assert membership.invited_at is not None

    result = await session.execute(
        select(Membership).where(Membership.organization_id == org.id)
    )
    members = result.scalars().all()
    assert [(m.user_id, m.is_admin) for m in members] == [(10, True)]


async def test_each_org_gets_its_own_admin(session):
    first, _ = await create_organization("Acme", 10, session)
    second, _ = await create_organization("Globex", 10, session)
    assert first.id != second.id

    result = await session.execute(select(Membership).where(Membership.user_id == 10))
    assert sorted(m.organization_id for m in result.scalars()) == sorted([first.id, second.id])


async def test_membership_failure_rolls_back_org(client, session_factory):
    """A failed admin insert must not leave an organization behind."""
    with patch(
        "org_service.stores.memberships.insert_membership",
        side_effect=OperationalError("INSERT", {}, Exception("disk full")),
    ):
        resp = await client.post(f"{API}/organization", json={"name": "Acme"}, headers=auth(10))

    assert resp.status_code == 500
    assert resp.json()["error"] == {
        "code": "UPSTREAM_UNAVAILABLE",
        "message": "Storage is unavailable",
    }

    async with session_factory() as s:
        result = await s.execute(select(Organization))
        assert result.scalars().all() == []


async def test_create_via_api_reports_organization(client):
    resp = await client.post(f"{API}/organization", json={"name": "Acme"}, headers=auth(10))
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    org = body["result"]
    assert org["name"] == "Acme"
    assert set(org) == {"id", "name", "createdAt", "updatedAt"}

    members = (await client.get(f"{API}/member/org/{org['id']}")).json()["result"]
    assert len(members) == 1
    assert members[0]["userId"] == 10
    assert members[0]["isAdmin"] is True


# ---------------------------------------------------------------------------
# The request transaction, through the real session dependency
# ---------------------------------------------------------------------------

@pytest.fixture
async def real_session_client(session_factory):
    """ASGI client using ``get_session`` itself, bound to the test engine."""
    with patch("org_service.core.database.async_session_factory", session_factory):
        async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
            yield ac


async def test_committed_org_is_visible_afterwards(real_session_client, session_factory):
    resp = await real_session_client.post(f"{API}/organization", json={"name": "Acme"}, headers=auth(10))
    assert resp.status_code == 200

    async with session_factory() as s:
        names = (await s.execute(select(Organization.name))).scalars().all()
    assert names == ["Acme"]


async def test_failed_commit_is_reported_as_500(real_session_client, session_factory):
    """The commit happens before the response starts, so its failure is what the client sees."""
    with patch.object(
        AsyncSession,
        "commit",
        side_effect=OperationalError("COMMIT", {}, Exception("connection lost")),
    ):
        resp = await real_session_client.post(
            f"{API}/organization", json={"name": "Acme"}, headers=auth(10)
        )

    assert resp.status_code == 500
    assert resp.json() == {
        "ok": False,
        "error": {"code": "UPSTREAM_UNAVAILABLE", "message": "Storage is unavailable"},
    }

    async with session_factory() as s:
        assert (await s.execute(select(Organization))).scalars().all() == []
        assert (await s.execute(select(Membership))).scalars().all() == []
