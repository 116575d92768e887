"""Booking endpoint tests."""

from __future__ import annotations

import asyncio
import uuid
from typing import Any

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.core.security import create_access_token
from app.db.session import get_sessionmaker
from app.models import Availability, Booking, BookingStatus
from app.services import notification_service

pytestmark = pytest.mark.asyncio


def auth_headers(user_id: object) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(str(user_id))}"}


async def _book(client: AsyncClient, ctx: dict[str, Any], *, as_user: str = "client_one_id"):
    return await client.post(
        "/api/v1/bookings",
        json={"developerId": str(ctx["developer_id"]), "slotId": str(ctx["slot_id"])},
        headers=auth_headers(ctx[as_user]),
    )


async def _cancel(client: AsyncClient, booking_id: str, user_id: object):
    return await client.post(
        "/api/v1/bookings/cancel",
        json={"bookingId": booking_id},
        headers=auth_headers(user_id),
    )


async def test_create_booking_returns_confirmation(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await _book(client, app_context)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    booking = body["booking"]
    assert set(booking) == {
        "id",
        "booked_start_time",
        "booked_end_time",
        "booking_status",
    }
    assert booking["booking_status"] == "confirmed"
    assert booking["booked_start_time"] < booking["booked_end_time"]

    availability = await client.get(
        f"/api/v1/developers/{app_context['developer_id']}/availability"
    )
    assert availability.status_code == 200
    assert availability.json()[0]["is_active"] is False


async def test_create_booking_requires_authentication(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    payload = {
        "developerId": str(app_context["developer_id"]),
        "slotId": str(app_context["slot_id"]),
    }

    missing = await client.post("/api/v1/bookings", json=payload)
    assert missing.status_code == 401
    assert missing.json() == {"success": False, "error": "User not authenticated"}

    garbage = await client.post(
        "/api/v1/bookings",
        json=payload,
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert garbage.status_code == 401
    assert garbage.json()["success"] is False


async def test_create_booking_missing_fields(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.post(
        "/api/v1/bookings",
        json={"developerId": str(app_context["developer_id"])},
        headers=auth_headers(app_context["client_one_id"]),
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_malformed_ids_are_not_found(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.post(
        "/api/v1/bookings",
        json={"developerId": "nope", "slotId": "also-nope"},
        headers=auth_headers(app_context["client_one_id"]),
    )
    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": "Availability slot not found or not active.",
    }

    cancel = await _cancel(client, "12345", app_context["client_one_id"])
    assert cancel.status_code == 404
    assert cancel.json()["success"] is False


async def test_wrong_developer_is_reported_as_missing_slot(
    app_context: dict[str, Any],
) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.post(
        "/api/v1/bookings",
        json={
            "developerId": str(app_context["other_developer_id"]),
            "slotId": str(app_context["slot_id"]),
        },
        headers=auth_headers(app_context["client_one_id"]),
    )
    assert response.status_code == 404
    assert response.json()["error"] == "Availability slot not found or not active."


async def test_double_booking_conflicts(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    assert (await _book(client, app_context)).status_code == 201

    second = await _book(client, app_context, as_user="client_two_id")
    assert second.status_code == 409
    assert second.json() == {
        "success": False,
        "error": "This slot has already been booked.",
    }


async def test_concurrent_requests_book_slot_once(
    app_context: dict[str, Any], db_url: str
) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    responses = await asyncio.gather(
        *[
            _book(
                client,
                app_context,
                as_user="client_one_id" if i % 2 else "client_two_id",
            )
            for i in range(6)
        ]
    )
    codes = sorted(response.status_code for response in responses)
    assert codes == [201, 409, 409, 409, 409, 409]

    async with get_sessionmaker(db_url)() as session:
        bookings = (await session.execute(select(Booking))).scalars().all()
    assert len(bookings) == 1
    assert bookings[0].status is BookingStatus.CONFIRMED


async def test_cancel_flow_and_status_mapping(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    booking_id = (await _book(client, app_context)).json()["booking"]["id"]

    forbidden = await _cancel(client, booking_id, app_context["client_two_id"])
    assert forbidden.status_code == 403
    assert forbidden.json()["success"] is False

    cancelled = await _cancel(client, booking_id, app_context["client_one_id"])
    assert cancelled.status_code == 200
    assert cancelled.json() == {
        "success": True,
        "message": "Booking cancelled successfully and slot reactivated.",
    }

    again = await _cancel(client, booking_id, app_context["client_one_id"])
    assert again.status_code == 400
    assert again.json() == {"success": False, "error": "Booking is already cancelled."}

    unknown = await _cancel(client, str(uuid.uuid4()), app_context["client_one_id"])
    assert unknown.status_code == 404

    missing = await client.post(
        "/api/v1/bookings/cancel",
        json={},
        headers=auth_headers(app_context["client_one_id"]),
    )
    assert missing.status_code == 400

    rebooked = await _book(client, app_context, as_user="client_two_id")
    assert rebooked.status_code == 201


async def test_notification_failure_does_not_affect_booking(
    app_context: dict[str, Any], monkeypatch: pytest.MonkeyPatch, db_url: str
) -> None:
    def _explode(*args: object, **kwargs: object) -> None:
        raise RuntimeError("mail server on fire")

    monkeypatch.setattr(notification_service, "notify_booking_confirmed", _explode)
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]

    response = await _book(client, app_context)
    assert response.status_code == 201
    assert response.json()["success"] is True

    async with get_sessionmaker(db_url)() as session:
        slot = await session.get(Availability, app_context["slot_id"])
    assert slot is not None and slot.is_active is False


async def test_unexpected_engine_failure_is_generic_500(
    app_context: dict[str, Any], monkeypatch: pytest.MonkeyPatch
) -> None:
    from app.services import reservation_engine

    async def _broken(*args: object, **kwargs: object) -> None:
        raise RuntimeError("connection reset with secret details")

    monkeypatch.setattr(reservation_engine, "reserve_slot", _broken)
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await _book(client, app_context)
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "secret" not in body["error"]


async def test_list_detail_and_delete(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    booking_id = (await _book(client, app_context)).json()["booking"]["id"]
    client_headers = auth_headers(app_context["client_one_id"])

    mine = await client.get("/api/v1/bookings", headers=client_headers)
    assert mine.status_code == 200
    assert [item["id"] for item in mine.json()] == [booking_id]

    as_developer = await client.get(
        "/api/v1/bookings", headers=auth_headers(app_context["developer_id"])
    )
    assert [item["id"] for item in as_developer.json()] == [booking_id]

    detail = await client.get(f"/api/v1/bookings/{booking_id}", headers=client_headers)
    assert detail.status_code == 200
    assert detail.json()["status"] == "confirmed"

    stranger = await client.get(
        f"/api/v1/bookings/{booking_id}",
        headers=auth_headers(app_context["client_two_id"]),
    )
    assert stranger.status_code == 404

    too_early = await client.delete(f"/api/v1/bookings/{booking_id}", headers=client_headers)
    assert too_early.status_code == 400
    assert too_early.json() == {
        "success": False,
        "error": "Only cancelled bookings can be deleted.",
    }

    await _cancel(client, booking_id, app_context["client_one_id"])
    deleted = await client.delete(f"/api/v1/bookings/{booking_id}", headers=client_headers)
    assert deleted.status_code == 204

    gone = await client.get(f"/api/v1/bookings/{booking_id}", headers=client_headers)
    assert gone.status_code == 404

    # deleting the row leaves the slot free
    availability = await client.get(
        f"/api/v1/developers/{app_context['developer_id']}/availability"
    )
    assert availability.json()[0]["is_active"] is True


@pytest.mark.parametrize(
    ("path", "request_kwargs"),
    [
        ("/api/v1/bookings", {}),
        ("/api/v1/bookings", {"json": {"developerId": 5, "slotId": ["x"]}}),
        ("/api/v1/bookings", {"content": b"not json"}),
        ("/api/v1/bookings/cancel", {}),
        ("/api/v1/bookings/cancel", {"json": {"bookingId": 42}}),
        ("/api/v1/bookings/cancel", {"content": b"not json"}),
    ],
)
async def test_malformed_payload_gets_booking_failure_body(
    app_context: dict[str, Any], path: str, request_kwargs: dict[str, Any]
) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = auth_headers(app_context["client_one_id"])
    headers["Content-Type"] = "application/json"

    response = await client.post(path, headers=headers, **request_kwargs)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Malformed request"}


async def test_bad_status_filter_uses_booking_failure_body(
    app_context: dict[str, Any],
) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.get(
        "/api/v1/bookings",
        params={"status": "lost"},
        headers=auth_headers(app_context["client_one_id"]),
    )
    assert response.status_code == 400
    assert response.json()["success"] is False
