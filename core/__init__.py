"""
Core business logic for the Google Calendar booking sync.
Framework-agnostic: the web API is one caller, tests are another.
"""

# Database (SQLAlchemy)
from .database import get_connection, get_transaction, get_engine, close_engine

# Constants
from .constants import PLUGIN_NAME, BOOKING_FIELDS, USER_FIELDS

# Configuration
from .plugin_config import (
    PluginConfig, ConfigurationMissingError,
    bool_config, get_plugin_config, save_plugin_config,
)
from .field_mapping import (
    BookingColumns, UserColumns, FieldMappingError, resolve_field_mapping,
)

# Entities
from .types import Booking, HostUser

# Booking push
from .bookings import BookingNotFoundError, HostUserNotFoundError, push_booking

# Install-time provisioning
from .provisioning import provision_schema

__all__ = [
    # Database
    "get_connection",
    "get_transaction",
    "get_engine",
    "close_engine",
    # Constants
    "PLUGIN_NAME",
    "BOOKING_FIELDS",
    "USER_FIELDS",
    # Configuration
    "PluginConfig",
    "ConfigurationMissingError",
    "bool_config",
    "get_plugin_config",
    "save_plugin_config",
    "BookingColumns",
    "UserColumns",
    "FieldMappingError",
    "resolve_field_mapping",
    # Entities
    "Booking",
    "HostUser",
    # Booking push
    "BookingNotFoundError",
    "HostUserNotFoundError",
    "push_booking",
    # Provisioning
    "provision_schema",
]
