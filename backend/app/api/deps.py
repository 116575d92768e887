"""Request dependencies: database session, bearer authentication, role guards."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.errors import UnauthenticatedError
from app.core.security import decode_subject
from app.db.session import get_session
from app.models.user import User, UserRole, UserStatus
from app.services import user_service

_token_url = f"{get_settings().api_v1_prefix}/auth/token"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=_token_url)
# booking routes report a missing token in their own error body
_lenient_oauth2_scheme = OAuth2PasswordBearer(tokenUrl=_token_url, auto_error=False)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


async def _active_user(session: AsyncSession, token: str | None) -> User | None:
    """Resolve ``token`` to an active account, or None for anything untrusted."""
    user_id = decode_subject(token)
    if user_id is None:
        return None
    user = await user_service.get_user(session, user_id)
    if user is None or user.status is not UserStatus.ACTIVE:
        return None
    return user


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> User:
    user = await _active_user(session, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_booking_caller(
    token: Annotated[str | None, Depends(_lenient_oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> User:
    """Like ``get_current_user`` but fails with ``UnauthenticatedError``."""
    user = await _active_user(session, token)
    if user is None:
        raise UnauthenticatedError()
    return user


def require_role(role: UserRole):
    """Build a dependency that admits only authenticated users holding ``role``."""

    async def _guard(user: Annotated[User, Depends(get_current_user)]) -> User:
        if user.role is not role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{role.value.capitalize()} role required",
            )
        return user

    return _guard


get_current_developer = require_role(UserRole.DEVELOPER)
