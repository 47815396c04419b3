"""Push a booking to its host's Google Calendar."""

import logging

from .calendar.events import create_google_event
from .database import get_connection
from .plugin_config import PluginConfig
from .queries.bookings import load_booking_by_id
from .queries.users import load_user_by_id

logger = logging.getLogger(__name__)


class BookingNotFoundError(Exception):
    """Raised when the booking id matches no row."""

    pass


class HostUserNotFoundError(Exception):
    """Raised when the booking's host user matches no row."""

    pass


async def push_booking(config: PluginConfig, booking_id: int) -> dict:
    """
    Create the calendar event for a booking.

    Loads the booking and its host, then hands off to create_google_event,
    which performs the provider call and the write-back.

    Returns:
        The created Google Calendar event

    Raises:
        BookingNotFoundError: If the booking does not exist
        HostUserNotFoundError: If the host user does not exist
        NotLinkedError: If the host has not linked Google Calendar
    """
    async with get_connection() as conn:
        booking = await load_booking_by_id(
            conn, config.bookings_table, config.booking_columns, booking_id
        )
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found")

        user = await load_user_by_id(
            conn, config.users_table, config.user_columns, booking.host_user_id
        )
        if user is None:
            raise HostUserNotFoundError(
                f"Host user {booking.host_user_id} not found for booking {booking_id}"
            )

    logger.info(f"Pushing booking {booking_id} to calendar of user {user.id}")
    return await create_google_event(config, user, booking)
