"""
Typed entities for host rows.

Only the fields this integration touches are carried. Rows come back from
the host tables keyed by physical column name; the from_row adapters use the
configured column records to translate them.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from .constants import DEFAULT_CALENDAR_ID
from .field_mapping import BookingColumns, UserColumns


@dataclass(frozen=True)
class HostUser:
    """Calendar owner on whose behalf events are created."""

    id: int
    refresh_token: str | None = None
    calendar_id: str = DEFAULT_CALENDAR_ID

    @property
    def is_linked(self) -> bool:
        return bool(self.refresh_token)

    @classmethod
    def from_row(cls, row: Mapping[str, Any], columns: UserColumns) -> "HostUser":
        calendar_id = row.get(columns.calendar_id) if columns.calendar_id else None
        return cls(
            id=row[columns.id],
            refresh_token=row.get(columns.refresh_token),
            calendar_id=calendar_id or DEFAULT_CALENDAR_ID,
        )


@dataclass(frozen=True)
class Booking:
    """A scheduled meeting awaiting (or having received) a calendar event."""

    id: int
    host_user_id: int
    start_time: datetime | str
    end_time: datetime | str
    guest_name: str | None = None
    guest_emails: tuple[str | None, ...] = ()
    status: str | None = None
    google_event_id: str | None = None
    meeting_link: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any], columns: BookingColumns) -> "Booking":
        def value(logical: str) -> Any:
            column = getattr(columns, logical)
            return row.get(column) if column else None

        return cls(
            id=value("id"),
            host_user_id=value("host_user_id"),
            start_time=value("start_time"),
            end_time=value("end_time"),
            guest_name=value("guest_name"),
            guest_emails=(
                value("guest_email"),
                value("guest_email2"),
                value("guest_email3"),
                value("guest_email4"),
            ),
            status=value("status"),
            google_event_id=value("google_event_id"),
            meeting_link=value("meeting_link"),
        )
