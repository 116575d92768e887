"""Profile upserts and developer browsing."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db_session
from app.models.availability import AvailabilityKind
from app.models.user import User
from app.schemas.availability import AvailabilityRead
from app.schemas.profile import (
    ClientProfileRead,
    ClientProfileUpsert,
    DeveloperProfileRead,
    DeveloperProfileUpsert,
    DeveloperSummary,
)
from app.services import availability_service, profile_service

profiles_router = APIRouter()
developers_router = APIRouter()


@profiles_router.put(
    "/developer",
    response_model=DeveloperProfileRead,
    summary="Create or update my developer profile",
)
async def upsert_developer_profile(
    payload: DeveloperProfileUpsert,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DeveloperProfileRead:
    try:
        profile = await profile_service.upsert_developer_profile(
            session, user=current_user, payload=payload
        )
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return DeveloperProfileRead.model_validate(profile)


@profiles_router.put(
    "/client",
    response_model=ClientProfileRead,
    summary="Create or update my client profile",
)
async def upsert_client_profile(
    payload: ClientProfileUpsert,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ClientProfileRead:
    try:
        profile = await profile_service.upsert_client_profile(
            session, user=current_user, payload=payload
        )
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ClientProfileRead.model_validate(profile)


@developers_router.get(
    "", response_model=list[DeveloperSummary], summary="Browse developers"
)
async def list_developers(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    skill: str | None = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[DeveloperSummary]:
    developers = await profile_service.list_developers(
        session, skill=skill, skip=skip, limit=limit
    )
    return [DeveloperSummary.model_validate(developer) for developer in developers]


@developers_router.get(
    "/{developer_id}", response_model=DeveloperSummary, summary="Developer detail"
)
async def get_developer(
    developer_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> DeveloperSummary:
    developer = await profile_service.get_developer(session, developer_id)
    if developer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Developer not found")
    return DeveloperSummary.model_validate(developer)


@developers_router.get(
    "/{developer_id}/availability",
    response_model=list[AvailabilityRead],
    summary="Developer availability",
)
async def list_developer_availability(
    developer_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    kind: AvailabilityKind | None = None,
) -> list[AvailabilityRead]:
    slots = await availability_service.list_availability(
        session, developer_id=developer_id, kind=kind
    )
    return [AvailabilityRead.model_validate(slot) for slot in slots]
