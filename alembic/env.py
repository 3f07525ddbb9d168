"""Alembic environment: runs migrations over the service's async engine URL."""

import asyncio

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel

from org_service.core.config import get_settings
import org_service.models  # noqa: F401  (populates SQLModel.metadata)

config = context.config
target_metadata = SQLModel.metadata
settings = get_settings()


def _include_object(obj, name, type_, reflected, compare_to):
    # users is owned by the identity provider
    return not (type_ == "table" and name == "users")


def run_migrations_offline() -> None:
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        include_object=_include_object,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        include_object=_include_object,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(settings.database_url)
    async with engine.connect() as connection:
        await connection.run_sync(_run_sync)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
