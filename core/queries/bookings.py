"""Booking queries using SQLAlchemy Core."""

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from ..field_mapping import BookingColumns
from ..tables import host_table
from ..types import Booking

logger = logging.getLogger(__name__)


async def load_booking_by_id(
    conn: AsyncConnection,
    table_name: str,
    columns: BookingColumns,
    booking_id: int,
) -> Booking | None:
    """Get a booking by primary key, or None if no such row."""
    bookings = host_table(table_name, *columns.mapped().values())
    result = await conn.execute(
        select(bookings).where(bookings.c[columns.id] == booking_id)
    )
    row = result.mappings().first()
    return Booking.from_row(row, columns) if row else None


async def update_booking_event(
    conn: AsyncConnection,
    table_name: str,
    columns: BookingColumns,
    booking_id: int,
    event_id: str,
    meet_link: str | None = None,
) -> None:
    """
    Record the created calendar event on the booking row.

    Only mapped columns are written. A missing meet link is stored as "".
    """
    values = {}
    if columns.google_event_id:
        values[columns.google_event_id] = event_id
    if columns.meeting_link:
        values[columns.meeting_link] = meet_link or ""

    if not values:
        logger.warning(
            f"Booking {booking_id}: no event columns mapped, skipping write-back"
        )
        return

    bookings = host_table(table_name, *columns.mapped().values())
    await conn.execute(
        update(bookings).where(bookings.c[columns.id] == booking_id).values(values)
    )
