"""Booking confirmation emails."""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from datetime import UTC, datetime
from email.message import EmailMessage
from pathlib import Path
from urllib.parse import urlencode
from zoneinfo import ZoneInfo

from fastapi import BackgroundTasks
from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.config import get_settings
from app.models.booking import Booking
from app.models.user import User

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"
_ENV = Environment(
    loader=FileSystemLoader(_TEMPLATE_DIR),
    autoescape=select_autoescape(["html", "xml"]),
)

_CALENDAR_URL = "https://www.google.com/calendar/render"


@dataclass(frozen=True)
class OutgoingEmail:
    recipients: list[str]
    subject: str
    body: str
    html: str | None = None


def _smtp_configured() -> bool:
    settings = get_settings()
    return bool(settings.smtp_host and settings.smtp_port)


def schedule_email(background_tasks: BackgroundTasks, email: OutgoingEmail) -> None:
    """Queue ``email`` for delivery once the response has been sent.

    Emails without an address, or any email while SMTP is unconfigured, are
    dropped with a debug line.
    """
    if not any(email.recipients):
        logger.debug("Email %r has no recipients; skipping", email.subject)
        return
    if not _smtp_configured():
        logger.debug("SMTP disabled; not queueing %r", email.subject)
        return
    background_tasks.add_task(_send_email, email)


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _calendar_stamp(value: datetime) -> str:
    return _utc(value).strftime("%Y%m%dT%H%M%SZ")


def build_calendar_link(
    *, client_name: str, developer_name: str, start: datetime, end: datetime
) -> str:
    """Google Calendar "add event" URL for the booked call."""
    query = urlencode(
        {
            "action": "TEMPLATE",
            "text": f"First Call: {client_name} with {developer_name}",
            "dates": f"{_calendar_stamp(start)}/{_calendar_stamp(end)}",
            "details": (
                "Booking for a first call session.\n"
                f"Client: {client_name}\nDeveloper: {developer_name}"
            ),
        }
    )
    return f"{_CALENDAR_URL}?{query}"


def format_booking_time(value: datetime, zone: ZoneInfo) -> str:
    """Human readable start time in the booking timezone, e.g. ``Monday, June 3, 2024 at 10:00 AM CEST``."""
    local = _utc(value).astimezone(zone)
    return (
        f"{local.strftime('%A, %B')} {local.day}, {local.year} at "
        f"{local.strftime('%I:%M %p %Z')}"
    )


def build_booking_confirmation_emails(
    *, booking: Booking, client: User, developer: User
) -> list[OutgoingEmail]:
    """Render the client and developer confirmation messages for ``booking``."""
    settings = get_settings()
    context = {
        "client_name": client.full_name,
        "developer_name": developer.full_name,
        "client_email": client.email,
        "booking_time": format_booking_time(booking.start_time, settings.booking_zone),
        "calendar_link": build_calendar_link(
            client_name=client.full_name,
            developer_name=developer.full_name,
            start=booking.start_time,
            end=booking.end_time,
        ),
        "notes": booking.notes,
        "sender_name": settings.email_sender_name,
    }
    client_email = OutgoingEmail(
        recipients=[client.email],
        subject=f"Your Booking Confirmation with {developer.full_name}",
        body=(
            f"Hello {client.full_name},\n\n"
            f"Your first call with {developer.full_name} is confirmed for "
            f"{context['booking_time']}.\n"
            f"Add it to your calendar: {context['calendar_link']}\n\n"
            f"-- The {settings.email_sender_name} Team"
        ),
        html=_ENV.get_template("booking_confirmation_client.html").render(**context),
    )
    developer_email = OutgoingEmail(
        recipients=[developer.email],
        subject=f"New Booking with {client.full_name}",
        body=(
            f"Hello {developer.full_name},\n\n"
            f"{client.full_name} ({client.email}) booked a first call with you for "
            f"{context['booking_time']}.\n"
            f"Add it to your calendar: {context['calendar_link']}\n\n"
            f"-- The {settings.email_sender_name} Team"
        ),
        html=_ENV.get_template("booking_confirmation_developer.html").render(**context),
    )
    return [client_email, developer_email]


def notify_booking_confirmed(
    booking: Booking,
    *,
    client: User,
    developer: User,
    background_tasks: BackgroundTasks,
) -> None:
    for email in build_booking_confirmation_emails(
        booking=booking, client=client, developer=developer
    ):
        schedule_email(background_tasks, email)


def _compose(email: OutgoingEmail) -> EmailMessage:
    settings = get_settings()
    sender = settings.smtp_from or settings.smtp_username or "no-reply@devconnect.local"
    message = EmailMessage()
    message["From"] = f"{settings.email_sender_name} <{sender}>"
    message["To"] = ", ".join(addr for addr in email.recipients if addr)
    message["Subject"] = email.subject
    message.set_content(email.body)
    if email.html:
        message.add_alternative(email.html, subtype="html")
    return message


def _send_email(email: OutgoingEmail) -> None:
    """Deliver ``email`` over SMTP; failures are logged and swallowed."""
    if not _smtp_configured():
        logger.info("SMTP settings missing; dropped %r", email.subject)
        return
    settings = get_settings()
    message = _compose(email)
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=5) as smtp:
            if settings.smtp_username and settings.smtp_password:
                try:
                    smtp.starttls()
                except smtplib.SMTPNotSupportedError:
                    logger.debug("SMTP server offers no STARTTLS")
                smtp.login(settings.smtp_username, settings.smtp_password)
            smtp.send_message(message)
    except Exception:  # pragma: no cover - delivery is best effort
        logger.exception("Delivery of %r to %s failed", email.subject, message["To"])
        return
    logger.info("Sent %r to %s", email.subject, message["To"])
