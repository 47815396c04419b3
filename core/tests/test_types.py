"""Tests for row adapters on the host entities."""

from datetime import datetime, timezone

from core.field_mapping import BookingColumns, UserColumns
from core.types import Booking, HostUser


class TestHostUserFromRow:
    def test_reads_mapped_columns(self):
        columns = UserColumns(id="uid", refresh_token="gtoken", calendar_id="gcal")

        user = HostUser.from_row(
            {"uid": 7, "gtoken": "1//refresh", "gcal": "team@example.com"}, columns
        )

        assert user == HostUser(
            id=7, refresh_token="1//refresh", calendar_id="team@example.com"
        )
        assert user.is_linked

    def test_empty_calendar_defaults_to_primary(self):
        columns = UserColumns(id="id", refresh_token="gtoken", calendar_id="gcal")

        user = HostUser.from_row({"id": 7, "gtoken": None, "gcal": None}, columns)

        assert user.calendar_id == "primary"
        assert not user.is_linked

    def test_unmapped_calendar_defaults_to_primary(self):
        columns = UserColumns(id="id", refresh_token="gtoken")

        user = HostUser.from_row({"id": 7, "gtoken": "tok"}, columns)

        assert user.calendar_id == "primary"


class TestBookingFromRow:
    def test_reads_mapped_columns(self):
        columns = BookingColumns.from_config(
            "bid,host,name,email,email2,,,starts,ends,state"
        )
        start = datetime(2026, 3, 2, 15, 0, tzinfo=timezone.utc)
        end = datetime(2026, 3, 2, 15, 30, tzinfo=timezone.utc)

        booking = Booking.from_row(
            {
                "bid": 42,
                "host": 7,
                "name": "Ada",
                "email": "ada@example.com",
                "email2": "",
                "starts": start,
                "ends": end,
                "state": "confirmed",
            },
            columns,
        )

        assert booking.id == 42
        assert booking.host_user_id == 7
        assert booking.guest_name == "Ada"
        assert booking.guest_emails == ("ada@example.com", "", None, None)
        assert booking.start_time == start
        assert booking.status == "confirmed"
        assert booking.google_event_id is None
        assert booking.meeting_link is None
