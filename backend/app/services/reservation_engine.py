"""Atomic slot reservation and release.

Both transitions run as one unit of work: the slot flag and the booking row
change together or not at all. Exclusion is layered. A keyed in-process lock
serializes the read-check-write for one slot or booking id, the row is read
``FOR UPDATE`` where the dialect supports it, and the flip itself is a
conditional UPDATE whose rowcount decides the winner.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from app.core.config import get_settings
from app.core.errors import (
    AlreadyCancelledError,
    BookingNotFoundError,
    DeveloperMismatchError,
    NotAuthorizedError,
    SlotAlreadyBookedError,
    SlotNotFoundError,
)
from app.core.locks import booking_locks, slot_locks
from app.db.session import transaction
from app.models.availability import Availability, AvailabilityKind
from app.models.booking import Booking, BookingStatus

logger = logging.getLogger(__name__)


def _sunday_based_weekday(value: date) -> int:
    return (value.weekday() + 1) % 7


def next_weekly_occurrence(
    day_of_week: int,
    start: time,
    end: time,
    *,
    now: datetime,
    zone: ZoneInfo,
) -> tuple[datetime, datetime]:
    """Return the first ``(start, end)`` of a weekly window starting after ``now``.

    ``day_of_week`` counts from Sunday = 0. Today is eligible when its start
    time is still ahead. The result is expressed in UTC.
    """
    local_now = now.astimezone(zone)
    days_ahead = (day_of_week - _sunday_based_weekday(local_now.date())) % 7
    occurrence = local_now.date() + timedelta(days=days_ahead)
    start_local = datetime.combine(occurrence, start, tzinfo=zone)
    if start_local <= local_now:
        occurrence += timedelta(days=7)
        start_local = datetime.combine(occurrence, start, tzinfo=zone)
    end_local = datetime.combine(occurrence, end, tzinfo=zone)
    return start_local.astimezone(UTC), end_local.astimezone(UTC)


def date_range_window(
    range_start: date, range_end: date, *, zone: ZoneInfo
) -> tuple[datetime, datetime]:
    """Cover the whole inclusive date span as a single occurrence."""
    start_local = datetime.combine(range_start, time.min, tzinfo=zone)
    end_local = datetime.combine(range_end + timedelta(days=1), time.min, tzinfo=zone)
    return start_local.astimezone(UTC), end_local.astimezone(UTC)


def booking_window(
    slot: Availability, *, now: datetime | None = None, zone: ZoneInfo | None = None
) -> tuple[datetime, datetime]:
    """Concrete booked interval for ``slot``.

    A date range whose last day is already over has nothing left to book and
    is reported as ``SlotNotFoundError``.
    """
    zone = zone or get_settings().booking_zone
    now = now or datetime.now(UTC)
    if slot.kind is AvailabilityKind.RECURRING_WEEKLY:
        if slot.day_of_week is None or slot.slot_start_time is None or slot.slot_end_time is None:
            raise SlotNotFoundError()
        return next_weekly_occurrence(
            slot.day_of_week,
            slot.slot_start_time,
            slot.slot_end_time,
            now=now,
            zone=zone,
        )
    if slot.range_start_date is None or slot.range_end_date is None:
        raise SlotNotFoundError()
    start, end = date_range_window(slot.range_start_date, slot.range_end_date, zone=zone)
    if end <= now:
        raise SlotNotFoundError()
    return start, end


async def reserve_slot(
    session: AsyncSession,
    *,
    client_id: uuid.UUID,
    developer_id: uuid.UUID,
    slot_id: uuid.UUID,
    notes: str | None = None,
    now: datetime | None = None,
) -> Booking:
    """Book ``slot_id`` for ``client_id`` and mark the slot taken.

    Raises ``SlotNotFoundError`` (or ``DeveloperMismatchError``) when the slot
    is missing or belongs to someone else, and ``SlotAlreadyBookedError`` when
    another reservation holds it.
    """
    async with slot_locks.hold(slot_id):
        async with transaction(session):
            result = await session.execute(
                select(Availability)
                .where(Availability.id == slot_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            slot = result.scalar_one_or_none()
            if slot is None:
                raise SlotNotFoundError()
            if slot.developer_id != developer_id:
                raise DeveloperMismatchError()
            if not slot.is_active:
                raise SlotAlreadyBookedError()

            start_time, end_time = booking_window(slot, now=now)
            booking = Booking(
                client_id=client_id,
                developer_id=developer_id,
                availability_id=slot.id,
                start_time=start_time,
                end_time=end_time,
                status=BookingStatus.CONFIRMED,
                notes=notes,
            )
            session.add(booking)
            try:
                await session.flush()
            except IntegrityError as exc:
                # confirmed-booking index tripped by a writer in another process
                raise SlotAlreadyBookedError() from exc

            flipped = await session.execute(
                update(Availability)
                .where(Availability.id == slot.id, Availability.is_active.is_(True))
                .values(is_active=False, booked_by_id=booking.id)
                .execution_options(synchronize_session=False)
            )
            if flipped.rowcount != 1:
                raise SlotAlreadyBookedError()
            set_committed_value(slot, "is_active", False)
            set_committed_value(slot, "booked_by_id", booking.id)

    logger.info(
        "Reserved slot %s for client %s (booking %s)", slot_id, client_id, booking.id
    )
    return booking


async def release_slot(
    session: AsyncSession,
    *,
    booking_id: uuid.UUID,
    requesting_client_id: uuid.UUID,
) -> Booking:
    """Cancel a booking and hand its slot back to the developer's calendar."""
    async with booking_locks.hold(booking_id):
        async with transaction(session):
            result = await session.execute(
                select(Booking)
                .where(Booking.id == booking_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            booking = result.scalar_one_or_none()
            if booking is None:
                raise BookingNotFoundError()
            if booking.client_id != requesting_client_id:
                raise NotAuthorizedError()
            if booking.status is BookingStatus.CANCELLED:
                raise AlreadyCancelledError()

            cancelled = await session.execute(
                update(Booking)
                .where(
                    Booking.id == booking.id,
                    Booking.status != BookingStatus.CANCELLED,
                )
                .values(status=BookingStatus.CANCELLED)
                .execution_options(synchronize_session=False)
            )
            if cancelled.rowcount != 1:
                raise AlreadyCancelledError()
            set_committed_value(booking, "status", BookingStatus.CANCELLED)

            reactivated = 0
            if booking.availability_id is not None:
                freed = await session.execute(
                    update(Availability)
                    .where(
                        Availability.id == booking.availability_id,
                        Availability.booked_by_id == booking.id,
                    )
                    .values(is_active=True, booked_by_id=None)
                    .execution_options(synchronize_session=False)
                )
                reactivated = freed.rowcount
            if reactivated != 1:
                logger.warning(
                    "Booking %s cancelled but slot %s was not reactivated",
                    booking.id,
                    booking.availability_id,
                )

    logger.info("Cancelled booking %s", booking_id)
    return booking


__all__ = [
    "booking_window",
    "date_range_window",
    "next_weekly_occurrence",
    "release_slot",
    "reserve_slot",
]
