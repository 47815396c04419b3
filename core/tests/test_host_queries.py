"""Tests for host table and plugin config queries."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from core.field_mapping import BookingColumns, UserColumns
from core.queries.bookings import load_booking_by_id, update_booking_event
from core.queries.plugin_config import (
    get_plugin_config_values,
    upsert_plugin_config_values,
)
from core.queries.users import load_user_by_id, save_user_tokens

USER_COLUMNS = UserColumns(
    id="id", refresh_token="google_refresh_token", calendar_id="calendar_id"
)


def _compiled(conn):
    """Compile the statement passed to the last conn.execute call."""
    stmt = conn.execute.call_args.args[0]
    return stmt.compile(dialect=postgresql.dialect())


def _sql(conn):
    """SQL text of the last executed statement, whitespace collapsed."""
    return " ".join(str(_compiled(conn)).split())


def _conn_returning(row=None, rowcount=1):
    conn = AsyncMock()
    result = MagicMock()
    result.mappings.return_value.first.return_value = row
    result.rowcount = rowcount
    conn.execute.return_value = result
    return conn


class TestLoadUserById:
    @pytest.mark.asyncio
    async def test_returns_host_user(self):
        conn = _conn_returning(
            {"id": 7, "google_refresh_token": "tok", "calendar_id": None}
        )

        user = await load_user_by_id(conn, "users", USER_COLUMNS, 7)

        assert user.id == 7
        assert user.refresh_token == "tok"
        assert user.calendar_id == "primary"
        compiled = _compiled(conn)
        assert "FROM users WHERE users.id =" in _sql(conn)
        assert compiled.params == {"id_1": 7}

    @pytest.mark.asyncio
    async def test_missing_row_returns_none(self):
        conn = _conn_returning(None)

        assert await load_user_by_id(conn, "users", USER_COLUMNS, 7) is None


class TestSaveUserTokens:
    @pytest.mark.asyncio
    async def test_writes_token_and_calendar(self):
        conn = _conn_returning(rowcount=1)

        updated = await save_user_tokens(conn, "users", USER_COLUMNS, 7, "tok")

        assert updated is True
        compiled = _compiled(conn)
        assert _sql(conn).startswith("UPDATE users SET")
        assert compiled.params["google_refresh_token"] == "tok"
        assert compiled.params["calendar_id"] == "primary"
        assert compiled.params["id_1"] == 7

    @pytest.mark.asyncio
    async def test_skips_unmapped_calendar_column(self):
        conn = _conn_returning(rowcount=1)
        columns = UserColumns(id="uid", refresh_token="gtoken")

        await save_user_tokens(conn, "accounts", columns, 7, "tok")

        compiled = _compiled(conn)
        assert "calendar_id" not in str(compiled)
        assert compiled.params["gtoken"] == "tok"

    @pytest.mark.asyncio
    async def test_no_row_updated(self):
        conn = _conn_returning(rowcount=0)

        assert await save_user_tokens(conn, "users", USER_COLUMNS, 99, "tok") is False


class TestLoadBookingById:
    @pytest.mark.asyncio
    async def test_returns_booking(self):
        columns = BookingColumns.from_config("id,host,name,email,,,,starts,ends")
        conn = _conn_returning(
            {
                "id": 42,
                "host": 7,
                "name": "Ada",
                "email": "ada@example.com",
                "starts": "2026-03-02T15:00:00Z",
                "ends": "2026-03-02T15:30:00Z",
            }
        )

        booking = await load_booking_by_id(conn, "Bookings", columns, 42)

        assert booking.id == 42
        assert booking.host_user_id == 7
        assert booking.guest_emails[0] == "ada@example.com"
        assert 'FROM "Bookings"' in _sql(conn)


class TestUpdateBookingEvent:
    @pytest.mark.asyncio
    async def test_writes_event_id_and_link(self):
        columns = BookingColumns.from_config(
            "id,host_user_id,,,,,,start_time,end_time,,event_ref,meet"
        )
        conn = _conn_returning()

        await update_booking_event(
            conn, "Bookings", columns, 42, "evt1", "https://meet.google.com/abc"
        )

        compiled = _compiled(conn)
        assert compiled.params["event_ref"] == "evt1"
        assert compiled.params["meet"] == "https://meet.google.com/abc"
        assert compiled.params["id_1"] == 42

    @pytest.mark.asyncio
    async def test_missing_link_stored_as_empty_string(self):
        columns = BookingColumns.from_config(
            "id,host_user_id,,,,,,start_time,end_time,,event_ref,meet"
        )
        conn = _conn_returning()

        await update_booking_event(conn, "Bookings", columns, 42, "evt1", None)

        assert _compiled(conn).params["meet"] == ""

    @pytest.mark.asyncio
    async def test_nothing_mapped_skips_write(self):
        columns = BookingColumns.from_config("id,host_user_id,,,,,,start_time,end_time")
        conn = _conn_returning()

        await update_booking_event(conn, "Bookings", columns, 42, "evt1", "")

        conn.execute.assert_not_called()


class TestPluginConfigValues:
    @pytest.mark.asyncio
    async def test_get_returns_key_value_dict(self):
        conn = AsyncMock()
        conn.execute.return_value = [
            SimpleNamespace(key="USERS_TABLE", value="members"),
            SimpleNamespace(key="GCAL_GENERATE_MEET_IF_EMPTY", value=False),
        ]

        values = await get_plugin_config_values(conn, "google-calendar-sync")

        assert values == {"USERS_TABLE": "members", "GCAL_GENERATE_MEET_IF_EMPTY": False}

    @pytest.mark.asyncio
    async def test_upsert_uses_on_conflict(self):
        conn = AsyncMock()

        await upsert_plugin_config_values(
            conn, "google-calendar-sync", {"USERS_TABLE": "members"}
        )

        sql = _sql(conn)
        assert sql.startswith("INSERT INTO plugin_config")
        assert "ON CONFLICT" in sql
        assert "DO UPDATE SET" in sql

    @pytest.mark.asyncio
    async def test_upsert_nothing_is_noop(self):
        conn = AsyncMock()

        await upsert_plugin_config_values(conn, "google-calendar-sync", {})

        conn.execute.assert_not_called()
