"""Per-user Google account linking (OAuth2 authorization-code flow)."""

import asyncio
import logging

from ..constants import DEFAULT_CALENDAR_ID
from ..database import get_transaction
from ..plugin_config import PluginConfig
from ..queries.users import save_user_tokens
from .client import build_oauth_flow

logger = logging.getLogger(__name__)


class InvalidStateError(Exception):
    """Raised when the OAuth state does not carry a usable user id."""

    pass


class MissingRefreshTokenError(Exception):
    """Raised when Google returns no refresh token (consent granted earlier)."""

    pass


class UserNotFoundError(Exception):
    """Raised when the user id from the OAuth state matches no row."""

    pass


def build_authorization_url(config: PluginConfig, user_id: int) -> str:
    """
    Build the Google consent URL for a host user.

    Asks for offline access and forces the consent screen so that a refresh
    token is issued. The user id travels as the OAuth state; it is an
    identifier visible to the user, not a secret.
    """
    flow = build_oauth_flow(config)
    url, _state = flow.authorization_url(
        access_type="offline",
        prompt="consent",
        state=str(user_id),
    )
    return url


def parse_state(state: str | None) -> int:
    """
    Parse the echoed OAuth state back into a user id.

    Raises:
        InvalidStateError: If state is missing, non-numeric or not positive
    """
    if not state:
        raise InvalidStateError("Missing state")
    try:
        user_id = int(state)
    except ValueError as e:
        raise InvalidStateError("Invalid state") from e
    if user_id <= 0:
        raise InvalidStateError("Invalid state")
    return user_id


async def exchange_code(config: PluginConfig, code: str) -> str:
    """
    Exchange an authorization code for the user's refresh token.

    Raises:
        MissingRefreshTokenError: If Google did not issue a refresh token
        ConfigurationMissingError: If the OAuth client is not configured
    """
    flow = build_oauth_flow(config)

    def _sync_fetch():
        return flow.fetch_token(code=code)

    tokens = await asyncio.to_thread(_sync_fetch)
    refresh_token = tokens.get("refresh_token")
    if not refresh_token:
        raise MissingRefreshTokenError(
            "No refresh token returned. Remove the app from your Google "
            "account permissions and retry."
        )
    return refresh_token


async def link_google_account(config: PluginConfig, code: str, state: str | None) -> int:
    """
    Complete the OAuth callback: validate state, exchange code, store tokens.

    Returns:
        The linked user's id

    Raises:
        InvalidStateError, MissingRefreshTokenError, UserNotFoundError
    """
    user_id = parse_state(state)
    refresh_token = await exchange_code(config, code)

    async with get_transaction() as conn:
        updated = await save_user_tokens(
            conn,
            config.users_table,
            config.user_columns,
            user_id,
            refresh_token,
            DEFAULT_CALENDAR_ID,
        )

    if not updated:
        raise UserNotFoundError(f"User {user_id} not found")

    logger.info(f"Google Calendar linked for user {user_id}")
    return user_id
