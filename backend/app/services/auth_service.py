"""Authentication service helpers."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import create_access_token, verify_password
from app.models.user import User, UserStatus
from app.schemas.auth import RegistrationRequest, Token
from app.services import user_service


async def authenticate_user(
    session: AsyncSession, email: str, password: str
) -> User | None:
    """Validate credentials and return a user if correct."""
    user = await user_service.get_user_by_email(session, email=email)
    if user is None:
        return None
    if user.status != UserStatus.ACTIVE:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def create_access_token_for_user(user: User) -> Token:
    """Generate a bearer token for a user."""
    return Token(access_token=create_access_token(str(user.id), role=user.role.value))


async def register_user(
    session: AsyncSession, payload: RegistrationRequest
) -> tuple[User, Token]:
    """Create a developer or client account and sign it in."""
    user = await user_service.create_user(session, payload)
    return user, create_access_token_for_user(user)
