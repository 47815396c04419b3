"""Google Calendar event creation for bookings."""

import asyncio
import logging
import time
from datetime import datetime
from typing import Iterable

from ..constants import (
    DEFAULT_CALENDAR_ID,
    DEFAULT_EVENT_SUMMARY,
    EVENT_DESCRIPTION,
    EVENT_TIMEZONE,
    MEET_CONFERENCE_TYPE,
    PLUGIN_NAME,
)
from ..database import get_transaction
from ..plugin_config import PluginConfig
from ..queries.bookings import update_booking_event
from ..types import Booking, HostUser
from .client import get_calendar_service, log_calendar_error

logger = logging.getLogger(__name__)


class NotLinkedError(Exception):
    """Raised when the host user has not linked a Google account."""

    pass


def pick_attendees(emails: Iterable[str | None]) -> list[dict]:
    """Attendee references for the non-empty guest emails, order preserved."""
    return [{"email": email} for email in emails if email]


def event_summary(booking: Booking) -> str:
    if booking.guest_name:
        return f"Meeting with {booking.guest_name}"
    return DEFAULT_EVENT_SUMMARY


def wants_meet_link(config: PluginConfig, booking: Booking) -> bool:
    """Generate a Meet link only when enabled and the booking has no link yet."""
    return config.generate_meet_if_empty and not booking.meeting_link


def _format_instant(value: datetime | str) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def build_event_body(booking: Booking, want_meet_link: bool) -> dict:
    """Event resource for a booking, times in UTC."""
    body = {
        "summary": event_summary(booking),
        "description": EVENT_DESCRIPTION,
        "start": {
            "dateTime": _format_instant(booking.start_time),
            "timeZone": EVENT_TIMEZONE,
        },
        "end": {
            "dateTime": _format_instant(booking.end_time),
            "timeZone": EVENT_TIMEZONE,
        },
        "attendees": pick_attendees(booking.guest_emails),
    }

    if want_meet_link:
        body["conferenceData"] = {
            "createRequest": {
                # Unique per booking and call time
                "requestId": f"{PLUGIN_NAME}-{time.time_ns()}-{booking.id}",
                "conferenceSolutionKey": {"type": MEET_CONFERENCE_TYPE},
            }
        }

    return body


def extract_meet_link(event: dict) -> str:
    """
    Meeting link from a created event.

    Prefers the video entry point of the conference data, then the legacy
    hangoutLink, else "".
    """
    conference = event.get("conferenceData") or {}
    for entry_point in conference.get("entryPoints") or []:
        if entry_point.get("entryPointType") == "video" and entry_point.get("uri"):
            return entry_point["uri"]
    return event.get("hangoutLink") or ""


async def create_google_event(
    config: PluginConfig,
    user: HostUser,
    booking: Booking,
) -> dict:
    """
    Create the calendar event for a booking on the host's calendar.

    Notifies attendees. On success the event id and meet link are written
    back to the booking row; provider errors propagate unmodified and leave
    the row untouched.

    Returns:
        The created event resource as returned by Google

    Raises:
        NotLinkedError: If the host has no refresh token
        ConfigurationMissingError: If the OAuth client is not configured
    """
    if not user.refresh_token:
        raise NotLinkedError("Host user is not linked to Google Calendar.")

    service = get_calendar_service(config, user.refresh_token)
    want_meet_link = wants_meet_link(config, booking)
    body = build_event_body(booking, want_meet_link)
    calendar_id = user.calendar_id or DEFAULT_CALENDAR_ID

    def _sync_insert():
        return (
            service.events()
            .insert(
                calendarId=calendar_id,
                body=body,
                conferenceDataVersion=1 if want_meet_link else 0,
                sendUpdates="all",
            )
            .execute()
        )

    try:
        event = await asyncio.to_thread(_sync_insert)
    except Exception as e:
        log_calendar_error(
            e,
            operation="insert_event",
            context={"booking_id": booking.id, "user_id": user.id},
        )
        raise

    meet_link = extract_meet_link(event)

    async with get_transaction() as conn:
        await update_booking_event(
            conn,
            config.bookings_table,
            config.booking_columns,
            booking.id,
            event["id"],
            meet_link,
        )

    logger.info(
        f"Created calendar event {event['id']} for booking {booking.id}"
        + (" with meet link" if meet_link else "")
    )
    return event
