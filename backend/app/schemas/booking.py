"""Pydantic schemas for bookings."""
from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.booking import BookingStatus


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class CreateBookingRequest(BaseModel):
    """Create-booking body. Fields are optional so absence maps to a 400."""

    developer_id: str | None = Field(default=None, alias="developerId")
    slot_id: str | None = Field(default=None, alias="slotId")
    notes: str | None = Field(default=None, max_length=2000)

    model_config = ConfigDict(populate_by_name=True)


class CancelBookingRequest(BaseModel):
    """Cancel-booking body."""

    booking_id: str | None = Field(default=None, alias="bookingId")

    model_config = ConfigDict(populate_by_name=True)


class BookingConfirmation(BaseModel):
    """Booking summary returned to the client after a reservation."""

    id: uuid.UUID
    booked_start_time: datetime
    booked_end_time: datetime
    booking_status: BookingStatus

    @field_validator("booked_start_time", "booked_end_time")
    @classmethod
    def _normalize(cls, value: datetime) -> datetime:
        return _as_utc(value)


class CreateBookingResponse(BaseModel):
    success: bool = True
    booking: BookingConfirmation


class CancelBookingResponse(BaseModel):
    success: bool = True
    message: str


class BookingRead(BaseModel):
    """Serialized booking for list and detail views."""

    id: uuid.UUID
    client_id: uuid.UUID
    developer_id: uuid.UUID
    availability_id: uuid.UUID | None = None
    start_time: datetime
    end_time: datetime
    status: BookingStatus
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("start_time", "end_time", "created_at", "updated_at")
    @classmethod
    def _normalize(cls, value: datetime) -> datetime:
        return _as_utc(value)
