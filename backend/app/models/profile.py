"""Marketplace profile models keyed by user id."""
from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import JSON, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin


class DeveloperProfile(TimestampMixin, Base):
    """Public-facing details for a developer offering calls."""

    __tablename__ = "developer_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    phone_number: Mapped[str | None] = mapped_column(String(32))
    skills: Mapped[list[str] | None] = mapped_column(JSON)
    focus_areas: Mapped[list[str] | None] = mapped_column(JSON)
    portfolio_url: Mapped[str | None] = mapped_column(String(500))
    github_url: Mapped[str | None] = mapped_column(String(500))
    portfolio_image_url: Mapped[str | None] = mapped_column(String(500))
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    location: Mapped[str | None] = mapped_column(String(200))
    years_of_experience: Mapped[int | None] = mapped_column(Integer)
    rating: Mapped[Decimal | None] = mapped_column(Numeric(3, 2))

    user: Mapped["User"] = relationship("User", back_populates="developer_profile")


class ClientProfile(TimestampMixin, Base):
    """Company details for a client booking developers."""

    __tablename__ = "client_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    client_name: Mapped[str] = mapped_column(String(200), nullable=False)
    company_name: Mapped[str | None] = mapped_column(String(200))
    logo_url: Mapped[str | None] = mapped_column(String(500))
    website_url: Mapped[str | None] = mapped_column(String(500))

    user: Mapped["User"] = relationship("User", back_populates="client_profile")
