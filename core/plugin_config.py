"""
Plugin configuration resolved from the admin-form store.

Values are read fresh for every request and frozen into a PluginConfig that
route handlers pass explicitly into the calendar and booking code.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncConnection

from .config import get_base_url
from .constants import PLUGIN_NAME
from .field_mapping import BookingColumns, UserColumns
from .queries.plugin_config import (
    get_plugin_config_values,
    upsert_plugin_config_values,
)

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "USERS_TABLE": "users",
    "BOOKINGS_TABLE": "Bookings",
    "USERS_ID_FIELD": "id",
    "BOOKING_FIELDS": (
        "id,host_user_id,guest_name,guest_email,guest_email2,guest_email3,"
        "guest_email4,start_time,end_time,status,google_event_id,meeting_link"
    ),
    "USER_FIELDS": "google_refresh_token,calendar_id",
}

CONFIG_KEYS = (
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "BASE_URL",
    "USERS_TABLE",
    "BOOKINGS_TABLE",
    "USERS_ID_FIELD",
    "BOOKING_FIELDS",
    "USER_FIELDS",
    "GOOGLE_SYNC_SECRET",
    "GCAL_GENERATE_MEET_IF_EMPTY",
)

SECRET_KEYS = ("GOOGLE_CLIENT_SECRET", "GOOGLE_SYNC_SECRET")


class ConfigurationMissingError(Exception):
    """Raised when required plugin settings (OAuth client) are not configured."""

    pass


def bool_config(values: Mapping[str, Any], name: str, default: bool = True) -> bool:
    """
    Read a boolean setting.

    True only for True, "true" or numeric 1. Missing or None gives the
    default; any other stored value is False.
    """
    val = values.get(name)
    if val is None:
        return default
    if isinstance(val, bool):
        return val
    if isinstance(val, (int, float)):
        return val == 1
    return val == "true"


@dataclass(frozen=True)
class PluginConfig:
    """Snapshot of the plugin settings for one request."""

    values: Mapping[str, Any]
    booking_columns: BookingColumns
    user_columns: UserColumns

    @classmethod
    def from_values(cls, stored: Mapping[str, Any]) -> "PluginConfig":
        """Merge stored values over defaults and validate the field mappings.

        Raises:
            FieldMappingError: If either mapping string is malformed
        """
        values = {**DEFAULTS, **{k: v for k, v in stored.items() if v is not None}}
        return cls(
            values=values,
            booking_columns=BookingColumns.from_config(values["BOOKING_FIELDS"]),
            user_columns=UserColumns.from_config(
                values["USER_FIELDS"], values["USERS_ID_FIELD"]
            ),
        )

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def flag(self, name: str, default: bool = True) -> bool:
        return bool_config(self.values, name, default)

    @property
    def users_table(self) -> str:
        return self.values["USERS_TABLE"]

    @property
    def bookings_table(self) -> str:
        return self.values["BOOKINGS_TABLE"]

    @property
    def webhook_secret(self) -> str | None:
        return self.values.get("GOOGLE_SYNC_SECRET") or None

    @property
    def generate_meet_if_empty(self) -> bool:
        return self.flag("GCAL_GENERATE_MEET_IF_EMPTY", True)

    @property
    def base_url(self) -> str:
        return (self.values.get("BASE_URL") or get_base_url()).rstrip("/")

    @property
    def redirect_uri(self) -> str:
        """OAuth redirect URI; must match the one registered with Google exactly."""
        return f"{self.base_url}/plugin/{PLUGIN_NAME}/oauth2/callback"

    def require_oauth_client(self) -> tuple[str, str]:
        """Return (client_id, client_secret) or raise ConfigurationMissingError."""
        client_id = self.values.get("GOOGLE_CLIENT_ID")
        client_secret = self.values.get("GOOGLE_CLIENT_SECRET")
        if not client_id or not client_secret:
            raise ConfigurationMissingError(
                "Missing plugin configuration for Google OAuth2"
            )
        return client_id, client_secret

    def public_values(self) -> dict[str, Any]:
        """Values for display in the admin form, with secrets masked."""
        public = {}
        for key in CONFIG_KEYS:
            value = self.values.get(key)
            if key in SECRET_KEYS and value:
                value = f"****{str(value)[-4:]}"
            public[key] = value
        return public


async def get_plugin_config(conn: AsyncConnection) -> PluginConfig:
    """
    Load the current configuration for this plugin.

    Database errors propagate. Malformed mappings raise FieldMappingError.
    """
    stored = await get_plugin_config_values(conn, PLUGIN_NAME)
    return PluginConfig.from_values(stored)


async def save_plugin_config(
    conn: AsyncConnection,
    updates: Mapping[str, Any],
) -> PluginConfig:
    """
    Save admin-form updates and return the resulting configuration.

    The merged result is validated before anything is written. A webhook
    secret is generated the first time none is stored.

    Raises:
        FieldMappingError: If the merged mappings are malformed
        ValueError: If an unknown key is given
    """
    unknown = set(updates) - set(CONFIG_KEYS)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    stored = await get_plugin_config_values(conn, PLUGIN_NAME)
    to_write = dict(updates)
    if not (to_write.get("GOOGLE_SYNC_SECRET") or stored.get("GOOGLE_SYNC_SECRET")):
        to_write["GOOGLE_SYNC_SECRET"] = secrets.token_urlsafe(16)
        logger.info("Generated new webhook secret for booking sync")

    config = PluginConfig.from_values({**stored, **to_write})
    await upsert_plugin_config_values(conn, PLUGIN_NAME, to_write)
    logger.info(f"Plugin configuration updated: {sorted(to_write)}")
    return config
