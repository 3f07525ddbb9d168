"""
Shared fixtures: an in-memory SQLite store standing in for PostgreSQL, an
ASGI client wired to it, and signed bearer tokens.
"""

import os

# Settings are read once at import time; pin them before the app is imported.
TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["ORG_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ORG_JWT_SECRET"] = TEST_JWT_SECRET
os.environ["ORG_JWT_ALGORITHMS"] = '["HS256"]'
os.environ["ORG_JWKS_URL"] = ""
os.environ["ORG_SERVICE_SECRET"] = ""
os.environ["ORG_LOG_FORMAT"] = "text"
os.environ["ORG_LOG_LEVEL"] = "warning"

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import org_service.models  # noqa: F401
from org_service.core.database import get_session
from org_service.main import app as fastapi_app
from org_service.models.membership import Membership
from org_service.models.organization import Organization
from org_service.models.user import User

API = "/api/organizations"


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
async def client(session_factory):
    async def _get_test_session():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    fastapi_app.dependency_overrides[get_session] = _get_test_session
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


def make_token(user_id, secret: str = TEST_JWT_SECRET, **extra) -> str:
    return jwt.encode({"id": user_id, **extra}, secret, algorithm="HS256")


def auth(user_id) -> dict:
    """Bearer headers for ``user_id``."""
    return {"Authorization": f"Bearer {make_token(user_id)}"}


# ---------------------------------------------------------------------------
# Seeding helpers (write straight to the store, bypassing authorization)
# ---------------------------------------------------------------------------

async def seed_org(session: AsyncSession, name: str, admin_id: int) -> tuple[Organization, Membership]:
    org = Organization(name=name)
    session.add(org)
    await session.flush()
    admin = Membership(organization_id=org.id, user_id=admin_id, is_admin=True)
    session.add(admin)
    await session.flush()
    return org, admin


async def seed_member(
    session: AsyncSession, org_id: int, user_id: int, *, is_admin: bool = False
) -> Membership:
    membership = Membership(organization_id=org_id, user_id=user_id, is_admin=is_admin)
    session.add(membership)
    await session.flush()
    return membership


async def seed_user(session: AsyncSession, user_id: int, email: str) -> User:
    user = User(id=user_id, email=email)
    session.add(user)
    await session.flush()
    return user
