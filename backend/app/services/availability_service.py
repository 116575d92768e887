"""Manage developer availability slots."""
from __future__ import annotations

import logging
import uuid
from contextlib import AsyncExitStack
from datetime import date, time

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.locks import slot_locks
from app.db.session import transaction
from app.models.availability import Availability, AvailabilityKind
from app.models.booking import Booking
from app.schemas.availability import DateRangeCreate, WeeklyAvailabilityReplace

logger = logging.getLogger(__name__)


def _validate_weekly(payload: WeeklyAvailabilityReplace) -> None:
    seen_days: set[int] = set()
    for day in payload.slots:
        if day.day_of_week in seen_days:
            raise ValueError(f"Day {day.day_of_week} listed more than once")
        seen_days.add(day.day_of_week)
        windows = sorted(day.time_ranges, key=lambda item: item.start)
        for window in windows:
            if window.start >= window.end:
                raise ValueError("Slot start time must be before its end time")
        for previous, current in zip(windows, windows[1:]):
            if current.start < previous.end:
                raise ValueError(
                    f"Overlapping time ranges on day {day.day_of_week}"
                )


def _slot_order(slot: Availability) -> tuple:
    # weekly slots by weekday and start, then ranges by start date
    if slot.kind is AvailabilityKind.RECURRING_WEEKLY:
        return (0, slot.day_of_week or 0, slot.slot_start_time or time.min, date.min)
    return (1, 0, time.min, slot.range_start_date or date.min)


async def _detach_bookings(session: AsyncSession, slot_ids: list[uuid.UUID]) -> None:
    # bookings outlive the slots they were made against
    if not slot_ids:
        return
    await session.execute(
        update(Booking)
        .where(Booking.availability_id.in_(slot_ids))
        .values(availability_id=None)
        .execution_options(synchronize_session="fetch")
    )


def _weekly_ids_query(developer_id: uuid.UUID, days: list[int]) -> Select:
    return select(Availability.id).where(
        Availability.developer_id == developer_id,
        Availability.kind == AvailabilityKind.RECURRING_WEEKLY,
        Availability.day_of_week.in_(days),
    )


async def replace_weekly_slots(
    session: AsyncSession,
    *,
    developer_id: uuid.UUID,
    payload: WeeklyAvailabilityReplace,
) -> list[Availability]:
    """Swap the weekly slots of every listed weekday for the supplied windows.

    The outgoing slots are locked the same way a reservation locks them, in id
    order, so a replacement never races a booking of one of those slots.
    """
    _validate_weekly(payload)
    days = [day.day_of_week for day in payload.slots]
    async with transaction(session):
        outgoing = sorted((await session.execute(_weekly_ids_query(developer_id, days))).scalars())

    created: list[Availability] = []
    async with AsyncExitStack() as held:
        for slot_id in outgoing:
            await held.enter_async_context(slot_locks.hold(slot_id))
        async with transaction(session):
            # only slots locked above are removed; later arrivals are left alone
            current = set((await session.execute(_weekly_ids_query(developer_id, days))).scalars())
            existing_ids = [slot_id for slot_id in outgoing if slot_id in current]
            await _detach_bookings(session, existing_ids)
            if existing_ids:
                await session.execute(
                    delete(Availability)
                    .where(Availability.id.in_(existing_ids))
                    .execution_options(synchronize_session="fetch")
                )
            for day in payload.slots:
                for window in day.time_ranges:
                    slot = Availability(
                        developer_id=developer_id,
                        kind=AvailabilityKind.RECURRING_WEEKLY,
                        day_of_week=day.day_of_week,
                        slot_start_time=window.start,
                        slot_end_time=window.end,
                        is_active=True,
                    )
                    session.add(slot)
                    created.append(slot)
            await session.flush()
    logger.info(
        "Replaced weekly availability for developer %s on days %s (%d removed, %d added)",
        developer_id,
        days,
        len(existing_ids),
        len(created),
    )
    return sorted(
        created, key=lambda slot: (slot.day_of_week or 0, slot.slot_start_time)
    )


async def add_date_range(
    session: AsyncSession,
    *,
    developer_id: uuid.UUID,
    payload: DateRangeCreate,
) -> Availability:
    if payload.range_start_date > payload.range_end_date:
        raise ValueError("Range start date must not be after its end date")
    slot = Availability(
        developer_id=developer_id,
        kind=AvailabilityKind.DATE_RANGE,
        range_start_date=payload.range_start_date,
        range_end_date=payload.range_end_date,
        is_active=True,
    )
    async with transaction(session):
        session.add(slot)
    await session.refresh(slot)
    return slot


async def list_availability(
    session: AsyncSession,
    *,
    developer_id: uuid.UUID,
    kind: AvailabilityKind | None = None,
) -> list[Availability]:
    stmt: Select[tuple[Availability]] = select(Availability).where(
        Availability.developer_id == developer_id
    )
    if kind is not None:
        stmt = stmt.where(Availability.kind == kind)
    result = await session.execute(stmt)
    return sorted(result.scalars().all(), key=_slot_order)


async def delete_availability(
    session: AsyncSession,
    *,
    developer_id: uuid.UUID,
    availability_id: uuid.UUID,
) -> None:
    """Remove one slot owned by ``developer_id``.

    Raises ``LookupError`` when the slot does not exist and ``PermissionError``
    when it belongs to another developer.
    """
    async with slot_locks.hold(availability_id):
        async with transaction(session):
            slot = await session.get(Availability, availability_id)
            if slot is None:
                raise LookupError("Availability not found")
            if slot.developer_id != developer_id:
                raise PermissionError("Availability belongs to another developer")
            await _detach_bookings(session, [slot.id])
            await session.delete(slot)
    logger.info("Deleted availability %s", availability_id)
