"""Liveness probe and throttling helpers."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.rate_limit import parse_rate
from app.main import app


@pytest.mark.asyncio
async def test_health_reports_database_and_timezone(reset_database: None) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == "DevConnect Booking API"
    assert body["booking_timezone"] == "UTC"
    assert body["database"] == "ok"
    assert response.headers.get("X-Request-ID")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("10/minute", (10, 60)),
        ("5 / Hours", (5, 3600)),
        ("1/second", (1, 1)),
        ("lots/minute", (7, 7)),
        ("10/fortnight", (7, 7)),
        ("", (7, 7)),
    ],
)
def test_parse_rate(value: str, expected: tuple[int, int]) -> None:
    assert parse_rate(value, fallback=(7, 7)) == expected
