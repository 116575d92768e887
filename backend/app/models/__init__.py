"""ORM models package export."""

from app.models.availability import Availability, AvailabilityKind
from app.models.booking import Booking, BookingStatus
from app.models.profile import ClientProfile, DeveloperProfile
from app.models.user import User, UserRole, UserStatus

__all__ = [
    "Availability",
    "AvailabilityKind",
    "Booking",
    "BookingStatus",
    "ClientProfile",
    "DeveloperProfile",
    "User",
    "UserRole",
    "UserStatus",
]
