"""Developer availability models."""
from __future__ import annotations

import enum
import uuid
from datetime import date, time

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    Enum,
    ForeignKey,
    Index,
    SmallInteger,
    Time,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin


class AvailabilityKind(str, enum.Enum):
    """Shape of a bookable availability record."""

    RECURRING_WEEKLY = "recurring_weekly"
    DATE_RANGE = "date_range"


class Availability(TimestampMixin, Base):
    """A unit of bookable time published by a developer.

    Weekly rows carry ``day_of_week`` (0 = Sunday) and a wall-clock window;
    range rows carry an inclusive date span. ``is_active`` is the free/booked
    flag the reservation engine contends over and ``booked_by_id`` names the
    booking holding the slot while it is inactive.
    """

    __tablename__ = "availabilities"
    __table_args__ = (
        CheckConstraint(
            "day_of_week IS NULL OR (day_of_week >= 0 AND day_of_week <= 6)",
            name="day_of_week_range",
        ),
        CheckConstraint(
            "slot_start_time IS NULL OR slot_end_time IS NULL "
            "OR slot_start_time < slot_end_time",
            name="slot_window_order",
        ),
        CheckConstraint(
            "range_start_date IS NULL OR range_end_date IS NULL "
            "OR range_start_date <= range_end_date",
            name="range_order",
        ),
        Index("ix_availabilities_developer_kind", "developer_id", "kind"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    developer_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    kind: Mapped[AvailabilityKind] = mapped_column(
        Enum(AvailabilityKind), nullable=False
    )
    day_of_week: Mapped[int | None] = mapped_column(SmallInteger)
    slot_start_time: Mapped[time | None] = mapped_column(Time(timezone=False))
    slot_end_time: Mapped[time | None] = mapped_column(Time(timezone=False))
    range_start_date: Mapped[date | None] = mapped_column(Date)
    range_end_date: Mapped[date | None] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    booked_by_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True))

    developer: Mapped["User"] = relationship("User")
