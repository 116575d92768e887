"""Developer availability endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_developer, get_db_session
from app.models.user import User
from app.schemas.availability import (
    AvailabilityRead,
    DateRangeCreate,
    WeeklyAvailabilityReplace,
)
from app.services import availability_service

router = APIRouter()


@router.put(
    "/weekly",
    response_model=list[AvailabilityRead],
    summary="Replace weekly slots for the listed weekdays",
)
async def replace_weekly_availability(
    payload: WeeklyAvailabilityReplace,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    developer: Annotated[User, Depends(get_current_developer)],
) -> list[AvailabilityRead]:
    try:
        slots = await availability_service.replace_weekly_slots(
            session, developer_id=developer.id, payload=payload
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return [AvailabilityRead.model_validate(slot) for slot in slots]


@router.post(
    "/ranges",
    response_model=AvailabilityRead,
    status_code=status.HTTP_201_CREATED,
    summary="Publish a date-range availability block",
)
async def create_date_range(
    payload: DateRangeCreate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    developer: Annotated[User, Depends(get_current_developer)],
) -> AvailabilityRead:
    try:
        slot = await availability_service.add_date_range(
            session, developer_id=developer.id, payload=payload
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return AvailabilityRead.model_validate(slot)


@router.delete(
    "/{availability_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove an availability slot",
)
async def delete_availability(
    availability_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    developer: Annotated[User, Depends(get_current_developer)],
) -> Response:
    try:
        await availability_service.delete_availability(
            session, developer_id=developer.id, availability_id=availability_id
        )
    except LookupError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except PermissionError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)
        ) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
