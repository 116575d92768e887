"""Database engines, sessions and the unit-of-work helper."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import get_settings

# concurrent writers wait this long for SQLite's database lock
SQLITE_BUSY_TIMEOUT_SECONDS = 30

_registry: dict[str, tuple[AsyncEngine, async_sessionmaker[AsyncSession]]] = {}


def _engine_options(url: str) -> dict[str, Any]:
    if make_url(url).get_backend_name() == "sqlite":
        return {"connect_args": {"timeout": SQLITE_BUSY_TIMEOUT_SECONDS}}
    return {"pool_pre_ping": True}


def get_sessionmaker(
    database_url: str | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to ``database_url`` (default: settings)."""
    url = database_url or get_settings().database_url
    entry = _registry.get(url)
    if entry is None:
        engine = create_async_engine(url, **_engine_options(url))
        factory = async_sessionmaker(engine, expire_on_commit=False)
        entry = _registry[url] = (engine, factory)
    return entry[1]


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield an async database session using the configured engine."""
    async with get_sessionmaker()() as session:
        yield session


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run the enclosed block as one unit of work.

    Commits when the block finishes and rolls back on any exception, so callers
    never observe a partially applied set of writes.
    """
    try:
        yield session
    except BaseException:
        await session.rollback()
        raise
    await session.commit()


async def dispose_engine(database_url: str | None = None) -> None:
    """Close the pooled connections for ``database_url`` and forget its factory."""
    url = database_url or get_settings().database_url
    entry = _registry.pop(url, None)
    if entry is not None:
        await entry[0].dispose()
