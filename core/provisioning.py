"""
Install-time schema provisioning for the host tables.

Creates the bookings table if it does not exist and adds the refresh token
and calendar id columns to the users table if they are missing. The users
table itself is never created. Safe to run repeatedly.
"""

import logging

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import Column, Integer, MetaData, Table, Text, inspect
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncConnection

from .field_mapping import BookingColumns
from .plugin_config import PluginConfig

logger = logging.getLogger(__name__)

# Logical booking fields that are not plain text
_BOOKING_TYPES = {
    "host_user_id": Integer,
    "start_time": TIMESTAMP(timezone=True),
    "end_time": TIMESTAMP(timezone=True),
}


def bookings_table_definition(table_name: str, columns: BookingColumns) -> Table:
    """Table definition for a fresh bookings table using the mapped names."""
    table_columns = [Column(columns.id, Integer, primary_key=True, autoincrement=True)]
    for logical, physical in columns.mapped().items():
        if logical == "id":
            continue
        table_columns.append(
            Column(
                physical,
                _BOOKING_TYPES.get(logical, Text),
                nullable=logical not in BookingColumns.REQUIRED,
            )
        )
    return Table(table_name, MetaData(), *table_columns)


def _provision(sync_conn: Connection, config: PluginConfig) -> dict:
    inspector = inspect(sync_conn)
    report = {"bookings_table_created": False, "user_columns_added": []}

    if not inspector.has_table(config.bookings_table):
        bookings_table_definition(config.bookings_table, config.booking_columns).create(
            sync_conn
        )
        report["bookings_table_created"] = True
        logger.info(f"Created bookings table {config.bookings_table!r}")

    if not inspector.has_table(config.users_table):
        logger.warning(
            f"Users table {config.users_table!r} does not exist, skipping column setup"
        )
        return report

    existing = {c["name"] for c in inspector.get_columns(config.users_table)}
    op = Operations(MigrationContext.configure(sync_conn))
    user_columns = config.user_columns
    for name in (user_columns.refresh_token, user_columns.calendar_id):
        if name and name not in existing:
            op.add_column(config.users_table, Column(name, Text))
            report["user_columns_added"].append(name)
            logger.info(f"Added column {name!r} to {config.users_table!r}")

    return report


async def provision_schema(conn: AsyncConnection, config: PluginConfig) -> dict:
    """
    Provision the host tables for this integration.

    Returns:
        {"bookings_table_created": bool, "user_columns_added": [column, ...]}
    """
    return await conn.run_sync(_provision, config)
