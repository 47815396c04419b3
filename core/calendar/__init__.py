"""Google Calendar integration: account linking and booking events."""

from .client import (
    build_oauth_flow,
    build_user_credentials,
    get_calendar_service,
    log_calendar_error,
)
from .events import (
    NotLinkedError,
    build_event_body,
    create_google_event,
    event_summary,
    extract_meet_link,
    pick_attendees,
    wants_meet_link,
)
from .oauth import (
    InvalidStateError,
    MissingRefreshTokenError,
    UserNotFoundError,
    build_authorization_url,
    exchange_code,
    link_google_account,
    parse_state,
)

__all__ = [
    "build_oauth_flow",
    "build_user_credentials",
    "get_calendar_service",
    "log_calendar_error",
    "NotLinkedError",
    "build_event_body",
    "create_google_event",
    "event_summary",
    "extract_meet_link",
    "pick_attendees",
    "wants_meet_link",
    "InvalidStateError",
    "MissingRefreshTokenError",
    "UserNotFoundError",
    "build_authorization_url",
    "exchange_code",
    "link_google_account",
    "parse_state",
]
