"""Google Calendar API client initialization."""

import logging

import sentry_sdk
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build, Resource
from googleapiclient.errors import HttpError

from ..constants import CALENDAR_SCOPES, GOOGLE_AUTH_URI, GOOGLE_TOKEN_URI
from ..plugin_config import PluginConfig

logger = logging.getLogger(__name__)


def _is_rate_limit_error(exception: Exception) -> bool:
    """Check if exception is a Google API rate limit error."""
    if isinstance(exception, HttpError):
        return exception.resp.status == 429
    return False


def log_calendar_error(
    exception: Exception,
    operation: str,
    context: dict | None = None,
) -> None:
    """
    Log calendar API errors with appropriate severity.

    Rate limits get warning level + specific Sentry event.
    Other errors get error level.
    """
    context = context or {}

    if _is_rate_limit_error(exception):
        logger.warning(
            f"Google Calendar rate limit hit during {operation}",
            extra={"operation": operation, **context},
        )
        sentry_sdk.capture_message(
            f"Google Calendar rate limit: {operation}",
            level="warning",
            extras={"operation": operation, **context},
        )
    else:
        logger.error(
            f"Google Calendar API error during {operation}: {exception}",
            extra={"operation": operation, **context},
        )
        sentry_sdk.capture_exception(exception)


def build_oauth_flow(config: PluginConfig) -> Flow:
    """
    Build a web-server OAuth flow for the configured client.

    Raises:
        ConfigurationMissingError: If client id or secret is not configured
    """
    client_id, client_secret = config.require_oauth_client()
    client_config = {
        "web": {
            "client_id": client_id,
            "client_secret": client_secret,
            "auth_uri": GOOGLE_AUTH_URI,
            "token_uri": GOOGLE_TOKEN_URI,
            "redirect_uris": [config.redirect_uri],
        }
    }
    # No PKCE: init and callback are separate requests and the verifier
    # would have nowhere to live in between.
    return Flow.from_client_config(
        client_config,
        scopes=CALENDAR_SCOPES,
        redirect_uri=config.redirect_uri,
        autogenerate_code_verifier=False,
    )


def build_user_credentials(config: PluginConfig, refresh_token: str) -> Credentials:
    """Credentials that mint access tokens from a host user's refresh token."""
    client_id, client_secret = config.require_oauth_client()
    return Credentials(
        token=None,
        refresh_token=refresh_token,
        token_uri=GOOGLE_TOKEN_URI,
        client_id=client_id,
        client_secret=client_secret,
        scopes=CALENDAR_SCOPES,
    )


def get_calendar_service(config: PluginConfig, refresh_token: str) -> Resource:
    """
    Build a Calendar v3 service acting as the given user.

    Built per call; credentials differ per host user.
    """
    creds = build_user_credentials(config, refresh_token)
    return build("calendar", "v3", credentials=creds, cache_discovery=False)
