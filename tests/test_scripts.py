"""Tests for the local organization bootstrap script."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import jwt
import pytest
from sqlmodel import select

from org_service.models.membership import Membership
from org_service.models.organization import Organization
from org_service.scripts import create_local_org as script

from conftest import TEST_JWT_SECRET


async def test_create_local_org_makes_admin(session):
    @asynccontextmanager
    async def _session_context():
        yield session

    with patch("org_service.scripts.create_local_org.get_session_context", _session_context):
        created = await script.create_local_org("Acme", 7)

    org = (await session.execute(select(Organization))).scalar_one()
    membership = (await session.execute(select(Membership))).scalar_one()
    assert created == {"organization_id": org.id, "membership_id": membership.id}
    assert org.name == "Acme"
    assert membership.user_id == 7
    assert membership.is_admin is True


def test_main_prints_ids(capsys):
    fake = AsyncMock(return_value={"organization_id": 3, "membership_id": 9})
    with patch("org_service.scripts.create_local_org.create_local_org", fake):
        script.main(["--name", "Acme", "--admin-user-id", "7"])

    fake.assert_awaited_once_with("Acme", 7, create_tables=False)
    assert capsys.readouterr().out.strip() == "Created organization 3 (admin membership 9)."


def test_main_prints_verifiable_token(capsys):
    fake = AsyncMock(return_value={"organization_id": 3, "membership_id": 9})
    with patch("org_service.scripts.create_local_org.create_local_org", fake):
        script.main(["--name", "Acme", "--admin-user-id", "7", "--create-tables", "--token"])

    fake.assert_awaited_once_with("Acme", 7, create_tables=True)
    token = capsys.readouterr().out.strip().splitlines()[-1]
    assert jwt.decode(token, TEST_JWT_SECRET, algorithms=["HS256"])["id"] == 7


def test_main_requires_admin_user_id():
    with pytest.raises(SystemExit):
        script.main(["--name", "Acme"])
