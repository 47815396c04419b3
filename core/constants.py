"""
Shared constants used across the integration.
"""

# Plugin namespace: config rows, route prefix and OAuth redirect path all use it
PLUGIN_NAME = "google-calendar-sync"

# Google OAuth / Calendar endpoints
GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"  # noqa: S105 - endpoint URL
CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar"]

DEFAULT_CALENDAR_ID = "primary"

# Event defaults
EVENT_DESCRIPTION = "Scheduled via Booking System"
EVENT_TIMEZONE = "UTC"
DEFAULT_EVENT_SUMMARY = "Scheduled Meeting"
MEET_CONFERENCE_TYPE = "hangoutsMeet"

# Logical field names, in the order the comma-separated mapping strings use
BOOKING_FIELDS = (
    "id",
    "host_user_id",
    "guest_name",
    "guest_email",
    "guest_email2",
    "guest_email3",
    "guest_email4",
    "start_time",
    "end_time",
    "status",
    "google_event_id",
    "meeting_link",
)

USER_FIELDS = (
    "refresh_token",
    "calendar_id",
)

GUEST_EMAIL_FIELDS = ("guest_email", "guest_email2", "guest_email3", "guest_email4")
