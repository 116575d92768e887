"""Tests for turning availability slots into concrete booked intervals."""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo

import pytest

from app.core.errors import SlotNotFoundError
from app.models import Availability, AvailabilityKind
from app.services.reservation_engine import (
    booking_window,
    date_range_window,
    next_weekly_occurrence,
)

UTC_ZONE = ZoneInfo("UTC")


def test_weekly_slot_uses_sunday_as_day_zero() -> None:
    # Wednesday 2024-06-05
    now = datetime(2024, 6, 5, 12, 0, tzinfo=UTC)
    start, end = next_weekly_occurrence(0, time(9), time(10), now=now, zone=UTC_ZONE)
    assert start == datetime(2024, 6, 9, 9, 0, tzinfo=UTC)
    assert end == datetime(2024, 6, 9, 10, 0, tzinfo=UTC)


def test_weekly_slot_later_today_books_today() -> None:
    # Monday 2024-06-10 09:00
    now = datetime(2024, 6, 10, 9, 0, tzinfo=UTC)
    start, _ = next_weekly_occurrence(1, time(10), time(11), now=now, zone=UTC_ZONE)
    assert start == datetime(2024, 6, 10, 10, 0, tzinfo=UTC)


def test_weekly_slot_starting_now_rolls_to_next_week() -> None:
    now = datetime(2024, 6, 10, 10, 0, tzinfo=UTC)
    start, end = next_weekly_occurrence(1, time(10), time(11), now=now, zone=UTC_ZONE)
    assert start == datetime(2024, 6, 17, 10, 0, tzinfo=UTC)
    assert end == datetime(2024, 6, 17, 11, 0, tzinfo=UTC)


def test_weekly_slot_in_reference_timezone_is_stored_in_utc() -> None:
    rome = ZoneInfo("Europe/Rome")
    now = datetime(2024, 6, 5, 12, 0, tzinfo=UTC)
    start, end = next_weekly_occurrence(1, time(10), time(11), now=now, zone=rome)
    # CEST is UTC+2 in June
    assert start == datetime(2024, 6, 10, 8, 0, tzinfo=UTC)
    assert end == datetime(2024, 6, 10, 9, 0, tzinfo=UTC)
    assert start.tzinfo is UTC


def test_weekday_is_judged_in_reference_timezone() -> None:
    tokyo = ZoneInfo("Asia/Tokyo")
    # Sunday 20:00 UTC is already Monday 05:00 in Tokyo
    now = datetime(2024, 6, 9, 20, 0, tzinfo=UTC)
    start, _ = next_weekly_occurrence(1, time(9), time(10), now=now, zone=tokyo)
    assert start == datetime(2024, 6, 10, 0, 0, tzinfo=UTC)


def test_date_range_covers_inclusive_days() -> None:
    start, end = date_range_window(date(2024, 7, 1), date(2024, 7, 3), zone=UTC_ZONE)
    assert start == datetime(2024, 7, 1, tzinfo=UTC)
    assert end == datetime(2024, 7, 4, tzinfo=UTC)


def test_single_day_range_in_new_york() -> None:
    start, end = date_range_window(
        date(2024, 1, 15), date(2024, 1, 15), zone=ZoneInfo("America/New_York")
    )
    assert start == datetime(2024, 1, 15, 5, 0, tzinfo=UTC)
    assert end == datetime(2024, 1, 16, 5, 0, tzinfo=UTC)


def test_booking_window_dispatches_on_kind() -> None:
    now = datetime(2024, 6, 5, 12, 0, tzinfo=UTC)
    weekly = Availability(
        kind=AvailabilityKind.RECURRING_WEEKLY,
        day_of_week=3,
        slot_start_time=time(15, 0),
        slot_end_time=time(15, 30),
    )
    block = Availability(
        kind=AvailabilityKind.DATE_RANGE,
        range_start_date=date(2024, 8, 1),
        range_end_date=date(2024, 8, 2),
    )
    assert booking_window(weekly, now=now, zone=UTC_ZONE) == (
        datetime(2024, 6, 5, 15, 0, tzinfo=UTC),
        datetime(2024, 6, 5, 15, 30, tzinfo=UTC),
    )
    assert booking_window(block, now=now, zone=UTC_ZONE) == (
        datetime(2024, 8, 1, tzinfo=UTC),
        datetime(2024, 8, 3, tzinfo=UTC),
    )


def test_finished_date_range_has_nothing_to_book() -> None:
    now = datetime(2024, 6, 5, 12, 0, tzinfo=UTC)
    finished = Availability(
        kind=AvailabilityKind.DATE_RANGE,
        range_start_date=date(2024, 6, 1),
        range_end_date=date(2024, 6, 4),
    )
    with pytest.raises(SlotNotFoundError):
        booking_window(finished, now=now, zone=UTC_ZONE)

    # a range whose last day is today is still open
    ongoing = Availability(
        kind=AvailabilityKind.DATE_RANGE,
        range_start_date=date(2024, 6, 3),
        range_end_date=date(2024, 6, 5),
    )
    assert booking_window(ongoing, now=now, zone=UTC_ZONE) == (
        datetime(2024, 6, 3, tzinfo=UTC),
        datetime(2024, 6, 6, tzinfo=UTC),
    )
