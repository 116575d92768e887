"""User data access helpers."""
from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_password_hash
from app.models.user import User
from app.schemas.user import UserCreate


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Return a user by email address."""
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Return a user by ID."""
    return await session.get(User, user_id)


async def create_user(session: AsyncSession, payload: UserCreate) -> User:
    """Persist a new user with hashed password.

    Raises ``ValueError`` when the email is already registered.
    """
    if await get_user_by_email(session, payload.email) is not None:
        raise ValueError("Email already registered")
    user = User(
        email=payload.email.lower(),
        hashed_password=get_password_hash(payload.password),
        full_name=payload.full_name,
        role=payload.role,
        timezone=payload.timezone,
        bio=payload.bio,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ValueError("Email already registered") from exc
    await session.refresh(user)
    return user
