"""Host user queries using SQLAlchemy Core."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from ..constants import DEFAULT_CALENDAR_ID
from ..field_mapping import UserColumns
from ..tables import host_table
from ..types import HostUser


async def load_user_by_id(
    conn: AsyncConnection,
    table_name: str,
    columns: UserColumns,
    user_id: int,
) -> HostUser | None:
    """Get a host user by primary key, or None if no such row."""
    users = host_table(table_name, *columns.mapped().values())
    result = await conn.execute(
        select(users).where(users.c[columns.id] == user_id)
    )
    row = result.mappings().first()
    return HostUser.from_row(row, columns) if row else None


async def save_user_tokens(
    conn: AsyncConnection,
    table_name: str,
    columns: UserColumns,
    user_id: int,
    refresh_token: str,
    calendar_id: str = DEFAULT_CALENDAR_ID,
) -> bool:
    """
    Store a user's Google refresh token and calendar id.

    The calendar id is skipped when its column is not mapped.

    Returns:
        True if a row was updated, False if the user does not exist
    """
    users = host_table(table_name, *columns.mapped().values())
    values = {columns.refresh_token: refresh_token}
    if columns.calendar_id:
        values[columns.calendar_id] = calendar_id or DEFAULT_CALENDAR_ID

    result = await conn.execute(
        update(users).where(users.c[columns.id] == user_id).values(values)
    )
    return result.rowcount > 0
