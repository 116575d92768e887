"""Account schemas shared by registration and profile listings."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, TypeAdapter

from app.models.user import UserRole, UserStatus

_email_adapter = TypeAdapter(EmailStr)


def _check_email(value: str) -> str:
    """Validate strictly, except that ``*.local`` seed addresses are accepted."""
    candidate = value.strip()
    local, _, domain = candidate.partition("@")
    if local and domain.endswith(".local"):
        return candidate
    return _email_adapter.validate_python(candidate)


def _check_timezone(value: str | None) -> str | None:
    if value is not None:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
    return value


AccountEmail = Annotated[str, AfterValidator(_check_email)]
IanaTimezone = Annotated[str | None, AfterValidator(_check_timezone)]


class UserBase(BaseModel):
    email: AccountEmail
    full_name: str = Field(min_length=1, max_length=200)
    role: UserRole
    timezone: IanaTimezone = None
    bio: str | None = Field(default=None, max_length=4000)


class UserCreate(UserBase):
    """Sign-up fields; the password is hashed before it is stored."""

    password: str = Field(min_length=8, max_length=128)


class UserRead(UserBase):
    id: uuid.UUID
    status: UserStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
