"""Liveness probe."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


async def _database_state(session: AsyncSession) -> str:
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Health probe could not reach the database", exc_info=True)
        return "unavailable"
    return "ok"


@router.get("", summary="Service and database status")
async def healthcheck(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict[str, str]:
    """Report the service identity, booking timezone and database reachability.

    The endpoint always answers 200 so load balancers can tell a slow database
    apart from a dead process.
    """
    settings = get_settings()
    return {
        "status": "ok",
        "service": settings.app_name,
        "environment": settings.app_env,
        "booking_timezone": settings.booking_timezone,
        "database": await _database_state(session),
        "checked_at": datetime.now(UTC).isoformat(),
    }
