"""Alembic migration runner for the booking schema."""

from __future__ import annotations

from logging.config import fileConfig
from os import environ

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import URL, make_url

from app.core.config import get_settings
from app.db.base import Base
from app.models import *  # noqa: F401,F403

# async drivers used by the app mapped to the blocking drivers Alembic needs
_SYNC_DRIVERS = {
    "postgresql": "postgresql+psycopg",
    "postgresql+asyncpg": "postgresql+psycopg",
    "sqlite+aiosqlite": "sqlite",
}

target_metadata = Base.metadata


def migration_url() -> URL:
    """Pick the database to migrate: SYNC_DATABASE_URL, DATABASE_URL, then settings."""
    raw = environ.get("SYNC_DATABASE_URL") or environ.get("DATABASE_URL")
    if not raw:
        settings = get_settings()
        raw = settings.sync_database_url or settings.database_url
    url = make_url(raw)
    return url.set(drivername=_SYNC_DRIVERS.get(url.drivername, url.drivername))


def _offline(url: URL) -> None:
    context.configure(
        url=url.render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _online(url: URL) -> None:
    engine = create_engine(url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        # SQLite cannot ALTER constraints in place
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

if context.is_offline_mode():
    _offline(migration_url())
else:
    _online(migration_url())
