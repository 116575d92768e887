"""Versioned API router."""

from fastapi import APIRouter

from . import auth, availability, bookings, health, profiles

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(
    profiles.profiles_router, prefix="/profiles", tags=["profiles"]
)
router.include_router(
    profiles.developers_router, prefix="/developers", tags=["developers"]
)
router.include_router(
    availability.router, prefix="/availability", tags=["availability"]
)
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])

__all__ = ["router"]
