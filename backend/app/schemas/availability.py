"""Pydantic schemas for developer availability."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, Field

from app.models.availability import AvailabilityKind


class TimeRange(BaseModel):
    """Wall-clock window inside a weekday."""

    start: time
    end: time


class WeeklyDaySlots(BaseModel):
    """Replacement slot set for one weekday (0 = Sunday)."""

    day_of_week: int = Field(ge=0, le=6)
    time_ranges: list[TimeRange] = Field(default_factory=list)


class WeeklyAvailabilityReplace(BaseModel):
    """Payload replacing the weekly slots of the listed weekdays."""

    slots: list[WeeklyDaySlots]


class DateRangeCreate(BaseModel):
    """Payload for a date-range availability block."""

    range_start_date: date
    range_end_date: date


class AvailabilityRead(BaseModel):
    """Serialized availability slot."""

    id: uuid.UUID
    developer_id: uuid.UUID
    kind: AvailabilityKind
    day_of_week: int | None = None
    slot_start_time: time | None = None
    slot_end_time: time | None = None
    range_start_date: date | None = None
    range_end_date: date | None = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
