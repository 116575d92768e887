"""Sign-in, sign-up and whoami endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db_session
from app.api.rate_limit import rate_limit
from app.core.config import get_settings
from app.models.user import User
from app.schemas.auth import RegistrationRequest, RegistrationResponse, Token
from app.schemas.user import UserRead
from app.services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter()

_settings = get_settings()
_login_throttle = rate_limit(_settings.rate_limit_login, fallback=(10, 60))
_signup_throttle = rate_limit(_settings.rate_limit_default, fallback=(100, 60))


@router.post(
    "/token",
    response_model=Token,
    summary="Exchange email and password for a bearer token",
    dependencies=[_login_throttle],
)
async def issue_token(
    form: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> Token:
    user = await auth_service.authenticate_user(
        session, email=form.username, password=form.password
    )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.info("Issued token for user %s", user.id)
    return auth_service.create_access_token_for_user(user)


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a developer or client account",
    dependencies=[_signup_throttle],
)
async def register_account(
    payload: RegistrationRequest,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> RegistrationResponse:
    """Create the account and sign it in straight away."""
    try:
        user, token = await auth_service.register_user(session, payload)
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    logger.info("New %s account %s", user.role.value, user.id)
    return RegistrationResponse(token=token, user=UserRead.model_validate(user))


@router.get("/me", response_model=UserRead, summary="Account of the bearer")
async def whoami(user: Annotated[User, Depends(get_current_user)]) -> User:
    return user
