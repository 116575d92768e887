"""Booking queries and housekeeping outside the reservation engine."""
from __future__ import annotations

import logging
import uuid

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import (
    BookingNotCancelledError,
    BookingNotFoundError,
    NotAuthorizedError,
)
from app.core.locks import booking_locks
from app.db.session import transaction
from app.models.booking import Booking, BookingStatus
from app.models.user import UserRole

logger = logging.getLogger(__name__)


async def list_bookings_for_user(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    role: UserRole,
    status: BookingStatus | None = None,
) -> list[Booking]:
    """Return bookings where the user is the client or developer, newest first."""
    column = Booking.client_id if role is UserRole.CLIENT else Booking.developer_id
    stmt: Select[tuple[Booking]] = select(Booking).where(column == user_id)
    if status is not None:
        stmt = stmt.where(Booking.status == status)
    stmt = stmt.order_by(Booking.start_time.desc(), Booking.created_at.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_booking_for_participant(
    session: AsyncSession, *, booking_id: uuid.UUID, user_id: uuid.UUID
) -> Booking:
    booking = await session.get(Booking, booking_id)
    # strangers see the same answer as a missing booking
    if booking is None or user_id not in (booking.client_id, booking.developer_id):
        raise BookingNotFoundError()
    return booking


async def delete_cancelled_booking(
    session: AsyncSession, *, booking_id: uuid.UUID, client_id: uuid.UUID
) -> None:
    """Remove a cancelled booking row owned by ``client_id``.

    Deletion never touches the slot; releasing it is the job of cancellation.
    """
    async with booking_locks.hold(booking_id):
        async with transaction(session):
            booking = await session.get(
                Booking, booking_id, populate_existing=True
            )
            if booking is None:
                raise BookingNotFoundError()
            if booking.client_id != client_id:
                raise NotAuthorizedError()
            if booking.status is not BookingStatus.CANCELLED:
                raise BookingNotCancelledError()
            await session.delete(booking)
    logger.info("Deleted cancelled booking %s", booking_id)
