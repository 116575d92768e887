"""Schema exports."""

from app.schemas.auth import RegistrationRequest, RegistrationResponse, Token
from app.schemas.availability import (
    AvailabilityRead,
    DateRangeCreate,
    TimeRange,
    WeeklyAvailabilityReplace,
    WeeklyDaySlots,
)
from app.schemas.booking import (
    BookingConfirmation,
    BookingRead,
    CancelBookingRequest,
    CancelBookingResponse,
    CreateBookingRequest,
    CreateBookingResponse,
)
from app.schemas.profile import (
    ClientProfileRead,
    ClientProfileUpsert,
    DeveloperProfileRead,
    DeveloperProfileUpsert,
    DeveloperSummary,
)
from app.schemas.user import UserCreate, UserRead

__all__ = [
    "AvailabilityRead",
    "BookingConfirmation",
    "BookingRead",
    "CancelBookingRequest",
    "CancelBookingResponse",
    "ClientProfileRead",
    "ClientProfileUpsert",
    "CreateBookingRequest",
    "CreateBookingResponse",
    "DateRangeCreate",
    "DeveloperProfileRead",
    "DeveloperProfileUpsert",
    "DeveloperSummary",
    "RegistrationRequest",
    "RegistrationResponse",
    "TimeRange",
    "Token",
    "UserCreate",
    "UserRead",
    "WeeklyAvailabilityReplace",
    "WeeklyDaySlots",
]
