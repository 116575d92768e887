"""Service layer exports."""
from app.services import (
    auth_service,
    availability_service,
    booking_service,
    notification_service,
    profile_service,
    reservation_engine,
    user_service,
)

__all__ = [
    "auth_service",
    "availability_service",
    "booking_service",
    "notification_service",
    "profile_service",
    "reservation_engine",
    "user_service",
]
