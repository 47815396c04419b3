"""Query layer for database operations using SQLAlchemy Core."""

from .bookings import load_booking_by_id, update_booking_event
from .plugin_config import get_plugin_config_values, upsert_plugin_config_values
from .users import load_user_by_id, save_user_tokens

__all__ = [
    # Host users
    "load_user_by_id",
    "save_user_tokens",
    # Bookings
    "load_booking_by_id",
    "update_booking_event",
    # Plugin config
    "get_plugin_config_values",
    "upsert_plugin_config_values",
]
