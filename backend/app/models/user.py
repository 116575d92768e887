"""User model for developer and client identities."""
from __future__ import annotations

import enum
import uuid

from sqlalchemy import Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin


class UserRole(str, enum.Enum):
    """Which side of the marketplace a user is on."""

    DEVELOPER = "developer"
    CLIENT = "client"


class UserStatus(str, enum.Enum):
    """Enumerates user activation states."""

    ACTIVE = "active"
    SUSPENDED = "suspended"


class User(TimestampMixin, Base):
    """User entity for authentication and authorization."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), nullable=False)
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus), default=UserStatus.ACTIVE, nullable=False
    )
    timezone: Mapped[str | None] = mapped_column(String(64))
    bio: Mapped[str | None] = mapped_column(Text)

    developer_profile: Mapped["DeveloperProfile | None"] = relationship(
        "DeveloperProfile", back_populates="user", uselist=False
    )
    client_profile: Mapped["ClientProfile | None"] = relationship(
        "ClientProfile", back_populates="user", uselist=False
    )
