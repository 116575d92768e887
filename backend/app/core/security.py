"""bcrypt password hashing and signed bearer tokens."""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from app.core.config import get_settings


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
    except (ValueError, TypeError):
        # a corrupt stored hash never matches
        return False


def create_access_token(subject: str, ttl: timedelta | None = None, **claims: Any) -> str:
    """Sign a JWT for ``subject`` (a user id); extra keyword args become claims."""
    settings = get_settings()
    lifetime = ttl or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {**claims, "sub": subject, "exp": datetime.now(UTC) + lifetime}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_subject(token: str | None) -> uuid.UUID | None:
    """Return the user id a valid token was issued for.

    Missing, expired, tampered or subject-less tokens all yield ``None`` so the
    caller has a single "not authenticated" branch.
    """
    if not token:
        return None
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return uuid.UUID(str(payload["sub"]))
    except (JWTError, KeyError, ValueError):
        return None
