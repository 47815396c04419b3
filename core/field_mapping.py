"""
Logical-to-physical column mapping for the host tables.

The host application's users and bookings tables can use any column names.
The admin form stores them as comma-separated strings whose positions line up
with the fixed logical lists in core.constants.
"""

from dataclasses import dataclass

from .constants import BOOKING_FIELDS, USER_FIELDS


class FieldMappingError(Exception):
    """Raised when a configured field mapping cannot be used."""

    pass


def resolve_field_mapping(
    config_string: str | None,
    logical_names: tuple[str, ...] | list[str],
) -> dict[str, str | None]:
    """
    Zip a comma-separated column list against the logical field names.

    Segments are matched by position and kept as-is (no whitespace trimming,
    empty segments included). Logical names past the end of the list map to
    None. Column names are not checked against the real schema.
    """
    physical = config_string.split(",") if config_string is not None else []
    return {
        name: physical[i] if i < len(physical) else None
        for i, name in enumerate(logical_names)
    }


def _split_checked(config_string: str, logical_names: tuple[str, ...], label: str) -> dict:
    segments = config_string.split(",")
    if len(segments) > len(logical_names):
        raise FieldMappingError(
            f"{label} lists {len(segments)} columns but only "
            f"{len(logical_names)} fields can be mapped"
        )
    mapping = resolve_field_mapping(config_string, logical_names)
    # Empty segments mean "not mapped"
    return {name: (column or None) for name, column in mapping.items()}


@dataclass(frozen=True)
class BookingColumns:
    """Physical column names for the bookings table (None = not mapped)."""

    id: str
    host_user_id: str
    start_time: str
    end_time: str
    guest_name: str | None = None
    guest_email: str | None = None
    guest_email2: str | None = None
    guest_email3: str | None = None
    guest_email4: str | None = None
    status: str | None = None
    google_event_id: str | None = None
    meeting_link: str | None = None

    REQUIRED = ("id", "host_user_id", "start_time", "end_time")

    @classmethod
    def from_config(cls, config_string: str) -> "BookingColumns":
        mapping = _split_checked(config_string, BOOKING_FIELDS, "BOOKING_FIELDS")
        missing = [name for name in cls.REQUIRED if not mapping[name]]
        if missing:
            raise FieldMappingError(
                f"BOOKING_FIELDS must map {', '.join(missing)}"
            )
        return cls(**mapping)

    def mapped(self) -> dict[str, str]:
        """Logical name -> column for every mapped field, in BOOKING_FIELDS order."""
        return {
            name: getattr(self, name)
            for name in BOOKING_FIELDS
            if getattr(self, name)
        }


@dataclass(frozen=True)
class UserColumns:
    """Physical column names for the host users table."""

    id: str
    refresh_token: str
    calendar_id: str | None = None

    @classmethod
    def from_config(cls, config_string: str, id_column: str = "id") -> "UserColumns":
        if not id_column:
            raise FieldMappingError("USERS_ID_FIELD must not be empty")
        mapping = _split_checked(config_string, USER_FIELDS, "USER_FIELDS")
        if not mapping["refresh_token"]:
            raise FieldMappingError("USER_FIELDS must map refresh_token")
        return cls(id=id_column, **mapping)

    def mapped(self) -> dict[str, str]:
        """Logical name -> column for every mapped field, id first."""
        return {
            name: getattr(self, name)
            for name in ("id", *USER_FIELDS)
            if getattr(self, name)
        }
