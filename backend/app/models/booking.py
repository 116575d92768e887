"""Booking ledger models."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import Enum, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin, UTCDateTime


class BookingStatus(str, enum.Enum):
    """Lifecycle states for bookings."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    REJECTED = "rejected"


class Booking(TimestampMixin, Base):
    """A reservation of one availability slot by one client."""

    __tablename__ = "bookings"
    __table_args__ = (
        # one confirmed booking per slot, whatever path wrote it
        Index(
            "uq_bookings_confirmed_availability",
            "availability_id",
            unique=True,
            postgresql_where=text("status = 'CONFIRMED'"),
            sqlite_where=text("status = 'CONFIRMED'"),
        ),
        Index("ix_bookings_client_start", "client_id", "start_time"),
        Index("ix_bookings_developer_start", "developer_id", "start_time"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    developer_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    availability_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("availabilities.id", ondelete="SET NULL")
    )
    start_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(String(2000))

    client: Mapped["User"] = relationship("User", foreign_keys=[client_id])
    developer: Mapped["User"] = relationship("User", foreign_keys=[developer_id])
    availability: Mapped["Availability | None"] = relationship("Availability")
