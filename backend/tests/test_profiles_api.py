"""Profile upsert and developer browsing tests."""

from __future__ import annotations

import uuid
from typing import Any

import pytest
from httpx import AsyncClient

from app.core.security import create_access_token

pytestmark = pytest.mark.asyncio


def _headers(user_id: object) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(str(user_id))}"}


async def test_developer_profile_upsert_and_browse(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    developer_id = app_context["developer_id"]

    created = await client.put(
        "/api/v1/profiles/developer",
        json={"skills": ["Python", "FastAPI"], "hourly_rate": "120.00"},
        headers=_headers(developer_id),
    )
    assert created.status_code == 200
    assert created.json()["skills"] == ["Python", "FastAPI"]

    updated = await client.put(
        "/api/v1/profiles/developer",
        json={"location": "Rome"},
        headers=_headers(developer_id),
    )
    assert updated.status_code == 200
    profile = updated.json()
    assert profile["location"] == "Rome"
    assert profile["skills"] == ["Python", "FastAPI"]

    filtered = await client.get("/api/v1/developers", params={"skill": "python"})
    assert filtered.status_code == 200
    assert [item["id"] for item in filtered.json()] == [str(developer_id)]

    everyone = await client.get("/api/v1/developers")
    assert len(everyone.json()) == 2

    detail = await client.get(f"/api/v1/developers/{developer_id}")
    assert detail.status_code == 200
    assert detail.json()["developer_profile"]["location"] == "Rome"


async def test_empty_developer_profile_update_is_rejected(
    app_context: dict[str, Any],
) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.put(
        "/api/v1/profiles/developer",
        json={},
        headers=_headers(app_context["developer_id"]),
    )
    assert response.status_code == 400


async def test_client_profile_requires_name(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = _headers(app_context["client_one_id"])

    missing = await client.put(
        "/api/v1/profiles/client", json={"company_name": "Acme"}, headers=headers
    )
    assert missing.status_code == 400

    created = await client.put(
        "/api/v1/profiles/client",
        json={"client_name": "Casey One", "company_name": "Acme"},
        headers=headers,
    )
    assert created.status_code == 200
    assert created.json()["company_name"] == "Acme"


async def test_profile_role_must_match(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    as_client = await client.put(
        "/api/v1/profiles/developer",
        json={"location": "Rome"},
        headers=_headers(app_context["client_one_id"]),
    )
    assert as_client.status_code == 403

    as_developer = await client.put(
        "/api/v1/profiles/client",
        json={"client_name": "Dana"},
        headers=_headers(app_context["developer_id"]),
    )
    assert as_developer.status_code == 403


async def test_unknown_developer(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.get(f"/api/v1/developers/{uuid.uuid4()}")
    assert response.status_code == 404

    client_as_developer = await client.get(
        f"/api/v1/developers/{app_context['client_one_id']}"
    )
    assert client_as_developer.status_code == 404
