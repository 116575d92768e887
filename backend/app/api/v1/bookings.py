"""Booking endpoints: reserve, cancel, list, inspect and delete."""

from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_booking_caller, get_db_session
from app.api.rate_limit import rate_limit
from app.core.config import get_settings
from app.core.errors import (
    BadRequestError,
    BookingNotFoundError,
    InternalError,
    NotAuthorizedError,
    ReservationError,
    SlotNotFoundError,
)
from app.models.booking import BookingStatus
from app.models.user import User, UserRole
from app.schemas.booking import (
    BookingConfirmation,
    BookingRead,
    CancelBookingRequest,
    CancelBookingResponse,
    CreateBookingRequest,
    CreateBookingResponse,
)
from app.services import (
    booking_service,
    notification_service,
    reservation_engine,
    user_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_booking_throttle = rate_limit(get_settings().rate_limit_default, fallback=(100, 60))


def _parse_id(value: str, not_found: type[ReservationError]) -> uuid.UUID:
    # an id that cannot exist is reported as missing
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError) as exc:
        raise not_found() from exc


@router.post(
    "",
    response_model=CreateBookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book an availability slot",
    dependencies=[_booking_throttle],
)
async def create_booking(
    payload: CreateBookingRequest,
    background_tasks: BackgroundTasks,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[User, Depends(get_booking_caller)],
) -> CreateBookingResponse:
    if not payload.developer_id or not payload.slot_id:
        raise BadRequestError("Missing developerId or slotId")
    developer_id = _parse_id(payload.developer_id, SlotNotFoundError)
    slot_id = _parse_id(payload.slot_id, SlotNotFoundError)

    try:
        booking = await reservation_engine.reserve_slot(
            session,
            client_id=caller.id,
            developer_id=developer_id,
            slot_id=slot_id,
            notes=payload.notes,
        )
    except ReservationError:
        raise
    except Exception as exc:
        logger.exception("Unexpected failure reserving slot %s", slot_id)
        raise InternalError() from exc

    # the booking is committed; email trouble must not change the outcome
    try:
        developer = await user_service.get_user(session, developer_id)
        if developer is not None:
            notification_service.notify_booking_confirmed(
                booking,
                client=caller,
                developer=developer,
                background_tasks=background_tasks,
            )
    except Exception:
        logger.exception("Booking %s confirmed but notification failed", booking.id)

    return CreateBookingResponse(
        booking=BookingConfirmation(
            id=booking.id,
            booked_start_time=booking.start_time,
            booked_end_time=booking.end_time,
            booking_status=booking.status,
        )
    )


@router.post(
    "/cancel",
    response_model=CancelBookingResponse,
    summary="Cancel a booking and free its slot",
)
async def cancel_booking(
    payload: CancelBookingRequest,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[User, Depends(get_booking_caller)],
) -> CancelBookingResponse:
    if not payload.booking_id:
        raise BadRequestError("Missing bookingId")
    booking_id = _parse_id(payload.booking_id, BookingNotFoundError)

    try:
        await reservation_engine.release_slot(
            session, booking_id=booking_id, requesting_client_id=caller.id
        )
    except ReservationError:
        raise
    except Exception as exc:
        logger.exception("Unexpected failure cancelling booking %s", booking_id)
        raise InternalError() from exc

    return CancelBookingResponse(
        message="Booking cancelled successfully and slot reactivated."
    )


@router.get("", response_model=list[BookingRead], summary="List my bookings")
async def list_bookings(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[User, Depends(get_booking_caller)],
    role: Annotated[UserRole | None, Query()] = None,
    booking_status: Annotated[BookingStatus | None, Query(alias="status")] = None,
) -> list[BookingRead]:
    bookings = await booking_service.list_bookings_for_user(
        session,
        user_id=caller.id,
        role=role or caller.role,
        status=booking_status,
    )
    return [BookingRead.model_validate(booking) for booking in bookings]


@router.get("/{booking_id}", response_model=BookingRead, summary="Booking detail")
async def get_booking(
    booking_id: str,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[User, Depends(get_booking_caller)],
) -> BookingRead:
    booking = await booking_service.get_booking_for_participant(
        session,
        booking_id=_parse_id(booking_id, BookingNotFoundError),
        user_id=caller.id,
    )
    return BookingRead.model_validate(booking)


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a cancelled booking",
)
async def delete_booking(
    booking_id: str,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[User, Depends(get_booking_caller)],
) -> Response:
    if caller.role is not UserRole.CLIENT:
        raise NotAuthorizedError("Only the booking client can delete a booking.")
    await booking_service.delete_cancelled_booking(
        session,
        booking_id=_parse_id(booking_id, BookingNotFoundError),
        client_id=caller.id,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
