"""Seed a local database with one developer, one client and a week of slots."""

from __future__ import annotations

import asyncio
from datetime import time

from app.core.config import get_settings
from app.db.session import get_sessionmaker
from app.models.user import UserRole
from app.schemas.availability import (
    TimeRange,
    WeeklyAvailabilityReplace,
    WeeklyDaySlots,
)
from app.schemas.profile import ClientProfileUpsert, DeveloperProfileUpsert
from app.schemas.user import UserCreate
from app.services import availability_service, profile_service, user_service

PASSWORD = "devconnect123"
DEVELOPER_EMAIL = "dev@devconnect.local"
CLIENT_EMAIL = "client@devconnect.local"


async def main() -> None:
    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        if await user_service.get_user_by_email(session, DEVELOPER_EMAIL):
            print(f"User {DEVELOPER_EMAIL} already exists")
            return

        developer = await user_service.create_user(
            session,
            UserCreate(
                email=DEVELOPER_EMAIL,
                password=PASSWORD,
                full_name="Ada Developer",
                role=UserRole.DEVELOPER,
                timezone=settings.booking_timezone,
            ),
        )
        client = await user_service.create_user(
            session,
            UserCreate(
                email=CLIENT_EMAIL,
                password=PASSWORD,
                full_name="Carl Client",
                role=UserRole.CLIENT,
            ),
        )
        await profile_service.upsert_developer_profile(
            session,
            user=developer,
            payload=DeveloperProfileUpsert(
                skills=["python", "fastapi"], years_of_experience=7
            ),
        )
        await profile_service.upsert_client_profile(
            session,
            user=client,
            payload=ClientProfileUpsert(client_name="Carl Client", company_name="Acme"),
        )
        # Monday to Friday, two morning calls each
        slots = await availability_service.replace_weekly_slots(
            session,
            developer_id=developer.id,
            payload=WeeklyAvailabilityReplace(
                slots=[
                    WeeklyDaySlots(
                        day_of_week=day,
                        time_ranges=[
                            TimeRange(start=time(9, 0), end=time(10, 0)),
                            TimeRange(start=time(10, 30), end=time(11, 30)),
                        ],
                    )
                    for day in range(1, 6)
                ]
            ),
        )
        print(
            f"Created developer {DEVELOPER_EMAIL} and client {CLIENT_EMAIL} "
            f"(password {PASSWORD}) with {len(slots)} weekly slots"
        )


if __name__ == "__main__":
    asyncio.run(main())
