"""Pydantic schemas for developer and client profiles."""

from __future__ import annotations

import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class DeveloperProfileUpsert(BaseModel):
    """Mutable developer profile fields; at least one must be supplied."""

    phone_number: str | None = None
    skills: list[str] | None = None
    focus_areas: list[str] | None = None
    portfolio_url: str | None = None
    github_url: str | None = None
    portfolio_image_url: str | None = None
    hourly_rate: Decimal | None = Field(default=None, ge=Decimal("0"))
    location: str | None = None
    years_of_experience: int | None = Field(default=None, ge=0)


class DeveloperProfileRead(DeveloperProfileUpsert):
    id: uuid.UUID
    rating: Decimal | None = None

    model_config = ConfigDict(from_attributes=True)


class ClientProfileUpsert(BaseModel):
    """Client profile fields; ``client_name`` is required by the service."""

    client_name: str | None = None
    company_name: str | None = None
    logo_url: str | None = None
    website_url: str | None = None


class ClientProfileRead(ClientProfileUpsert):
    id: uuid.UUID
    client_name: str

    model_config = ConfigDict(from_attributes=True)


class DeveloperSummary(BaseModel):
    """Developer card used by the browse listing."""

    id: uuid.UUID
    full_name: str
    bio: str | None = None
    timezone: str | None = None
    developer_profile: DeveloperProfileRead | None = None

    model_config = ConfigDict(from_attributes=True)
