"""Plugin configuration queries using SQLAlchemy Core."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import plugin_config


async def get_plugin_config_values(
    conn: AsyncConnection,
    plugin_name: str,
) -> dict[str, Any]:
    """Get every stored key/value for a plugin namespace."""
    result = await conn.execute(
        select(plugin_config.c.key, plugin_config.c.value).where(
            plugin_config.c.plugin_name == plugin_name
        )
    )
    return {row.key: row.value for row in result}


async def upsert_plugin_config_values(
    conn: AsyncConnection,
    plugin_name: str,
    values: dict[str, Any],
) -> None:
    """Insert or overwrite the given keys for a plugin namespace."""
    if not values:
        return

    now = datetime.now(timezone.utc)
    stmt = insert(plugin_config).values(
        [
            {"plugin_name": plugin_name, "key": key, "value": value, "updated_at": now}
            for key, value in values.items()
        ]
    )
    await conn.execute(
        stmt.on_conflict_do_update(
            index_elements=[plugin_config.c.plugin_name, plugin_config.c.key],
            set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
        )
    )
