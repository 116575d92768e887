"""Developer and client profile helpers."""
from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.session import transaction
from app.models.profile import ClientProfile, DeveloperProfile
from app.models.user import User, UserRole, UserStatus
from app.schemas.profile import ClientProfileUpsert, DeveloperProfileUpsert


async def upsert_developer_profile(
    session: AsyncSession, *, user: User, payload: DeveloperProfileUpsert
) -> DeveloperProfile:
    """Create or update the caller's developer profile."""
    if user.role is not UserRole.DEVELOPER:
        raise PermissionError("Only developers have a developer profile")
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise ValueError("No profile fields supplied")
    async with transaction(session):
        profile = await session.get(DeveloperProfile, user.id)
        if profile is None:
            profile = DeveloperProfile(id=user.id)
            session.add(profile)
        for field, value in changes.items():
            setattr(profile, field, value)
    await session.refresh(profile)
    return profile


async def upsert_client_profile(
    session: AsyncSession, *, user: User, payload: ClientProfileUpsert
) -> ClientProfile:
    """Create or update the caller's client profile."""
    if user.role is not UserRole.CLIENT:
        raise PermissionError("Only clients have a client profile")
    if not payload.client_name or not payload.client_name.strip():
        raise ValueError("client_name is required")
    changes = payload.model_dump(exclude_unset=True)
    changes["client_name"] = payload.client_name.strip()
    async with transaction(session):
        profile = await session.get(ClientProfile, user.id)
        if profile is None:
            profile = ClientProfile(id=user.id, client_name=changes["client_name"])
            session.add(profile)
        for field, value in changes.items():
            setattr(profile, field, value)
    await session.refresh(profile)
    return profile


async def list_developers(
    session: AsyncSession,
    *,
    skill: str | None = None,
    skip: int = 0,
    limit: int = 50,
) -> list[User]:
    """Return active developers, optionally narrowed to one skill."""
    result = await session.execute(
        select(User)
        .options(selectinload(User.developer_profile))
        .where(User.role == UserRole.DEVELOPER, User.status == UserStatus.ACTIVE)
        .order_by(User.full_name.asc())
    )
    developers = list(result.scalars().all())
    if skill:
        # skills live in a JSON column; match case-insensitively in Python
        wanted = skill.strip().lower()
        developers = [
            developer
            for developer in developers
            if developer.developer_profile is not None
            and any(
                wanted == item.lower()
                for item in developer.developer_profile.skills or []
            )
        ]
    return developers[skip : skip + limit]


async def get_developer(session: AsyncSession, developer_id: uuid.UUID) -> User | None:
    result = await session.execute(
        select(User)
        .options(selectinload(User.developer_profile))
        .where(User.id == developer_id, User.role == UserRole.DEVELOPER)
    )
    return result.scalar_one_or_none()
