"""Authentication schemas."""
from __future__ import annotations

from pydantic import BaseModel

from app.schemas.user import UserCreate, UserRead


class Token(BaseModel):
    """Response body for access tokens."""

    access_token: str
    token_type: str = "bearer"


class RegistrationRequest(UserCreate):
    """Self-service sign-up payload for developers and clients."""


class RegistrationResponse(BaseModel):
    """Response after successful self-service registration."""

    token: Token
    user: UserRead
