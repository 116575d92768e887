"""Test fixtures for the DevConnect booking backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from app.core.config import get_settings
from app.core.security import get_password_hash
from app.db.base import Base
from app.db.session import dispose_engine, get_sessionmaker
from app.main import app
from app.models import (
    Availability,
    AvailabilityKind,
    User,
    UserRole,
    UserStatus,
)

PASSWORD = "Passw0rd!"


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def seeded(reset_database: None, db_url: str) -> dict[str, object]:
    """Seed one developer with a Monday 10:00-11:00 slot, a second developer and two clients."""
    sessionmaker = get_sessionmaker(db_url)
    hashed = get_password_hash(PASSWORD)

    async with sessionmaker() as session:
        developer = User(
            email="dev@example.com",
            hashed_password=hashed,
            full_name="Dana Developer",
            role=UserRole.DEVELOPER,
            status=UserStatus.ACTIVE,
        )
        other_developer = User(
            email="other.dev@example.com",
            hashed_password=hashed,
            full_name="Olli Other",
            role=UserRole.DEVELOPER,
            status=UserStatus.ACTIVE,
        )
        client_one = User(
            email="c1@example.com",
            hashed_password=hashed,
            full_name="Casey One",
            role=UserRole.CLIENT,
            status=UserStatus.ACTIVE,
        )
        client_two = User(
            email="c2@example.com",
            hashed_password=hashed,
            full_name="Chris Two",
            role=UserRole.CLIENT,
            status=UserStatus.ACTIVE,
        )
        session.add_all([developer, other_developer, client_one, client_two])
        await session.flush()

        slot = Availability(
            developer_id=developer.id,
            kind=AvailabilityKind.RECURRING_WEEKLY,
            day_of_week=1,
            slot_start_time=time(10, 0),
            slot_end_time=time(11, 0),
            is_active=True,
        )
        session.add(slot)
        await session.commit()

        return {
            "developer_id": developer.id,
            "other_developer_id": other_developer.id,
            "client_one_id": client_one.id,
            "client_two_id": client_two.id,
            "slot_id": slot.id,
        }


@pytest_asyncio.fixture()
async def app_context(
    seeded: dict[str, object],
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client alongside the seeded marketplace data."""
    context = dict(seeded)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context
