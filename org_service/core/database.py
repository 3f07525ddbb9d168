"""
Database engine and the unit-of-work session.

One session, and therefore one transaction, per request: the session commits
when the endpoint returns and rolls back on any exception, which is what
makes multi-step writes such as organization creation atomic. Routes depend
on ``get_session`` with ``scope="function"`` so the commit finishes before the
response starts and a failed commit still reaches the exception handlers.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from org_service.core.config import Settings, get_settings


def build_engine(settings: Settings) -> AsyncEngine:
    """Engine for ``settings.database_url``. SQLite gets no pool tuning."""
    kwargs = {"echo": settings.debug}
    if make_url(settings.database_url).get_backend_name() != "sqlite":
        kwargs["pool_pre_ping"] = True
    return create_async_engine(settings.database_url, **kwargs)


engine = build_engine(get_settings())

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db():
    """Create all tables (development only, migrations own production schema)."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def ping(session: AsyncSession) -> None:
    """Round-trip to the store; raises if it is unreachable."""
    await session.execute(text("SELECT 1"))


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """Transaction scope for scripts and anything outside a request."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: the request's transaction.

    Use as ``Depends(get_session, scope="function")``.
    """
    async with get_session_context() as session:
        yield session
