"""
Google account linking routes.

Endpoints:
- GET /plugin/google-calendar-sync/oauth2/init - Start Google OAuth for the signed-in user
- GET /plugin/google-calendar-sync/oauth2/callback - Handle Google's redirect back
"""

import logging
import sys
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse, RedirectResponse

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from core.calendar.oauth import (
    InvalidStateError,
    MissingRefreshTokenError,
    UserNotFoundError,
    build_authorization_url,
    link_google_account,
)
from core.constants import PLUGIN_NAME
from core.plugin_config import ConfigurationMissingError, PluginConfig
from web_api.auth import get_current_user, get_user_id
from web_api.dependencies import get_request_config

router = APIRouter(prefix=f"/plugin/{PLUGIN_NAME}/oauth2", tags=["oauth"])

logger = logging.getLogger(__name__)


@router.get("/init")
async def oauth_init(
    user: dict = Depends(get_current_user),
    config: PluginConfig = Depends(get_request_config),
):
    """
    Start the Google OAuth flow for the signed-in host user.

    Redirects to Google's consent screen with offline access so a refresh
    token is issued.
    """
    user_id = get_user_id(user)

    try:
        url = build_authorization_url(config, user_id)
    except ConfigurationMissingError as e:
        logger.error(f"OAuth init failed: {e}")
        raise HTTPException(status_code=500, detail="OAuth init failed.")

    return RedirectResponse(url=url)


@router.get("/callback", response_class=PlainTextResponse)
async def oauth_callback(
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    config: PluginConfig = Depends(get_request_config),
):
    """
    Handle Google's redirect after consent.

    The state carries the user id set in /init. Exchanges the code for
    tokens and stores the refresh token on the user row.
    """
    if error:
        logger.warning(f"OAuth callback returned error: {error}")
        raise HTTPException(status_code=400, detail=f"Google returned an error: {error}")

    if not code:
        logger.warning(f"OAuth callback without code (state={state!r})")
        raise HTTPException(status_code=400, detail="Missing code")

    try:
        user_id = await link_google_account(config, code, state)
    except InvalidStateError as e:
        logger.warning(f"OAuth callback rejected: {e} (state={state!r})")
        raise HTTPException(status_code=400, detail=str(e))
    except MissingRefreshTokenError as e:
        logger.warning(f"OAuth callback without refresh token (state={state})")
        raise HTTPException(status_code=400, detail=str(e))
    except UserNotFoundError as e:
        logger.warning(f"OAuth callback for unknown user: {e} (state={state!r})")
        raise HTTPException(status_code=404, detail="User not found")
    except Exception as e:
        logger.exception(f"OAuth callback failed (state={state}): {e}")
        raise HTTPException(status_code=500, detail="OAuth callback failed.")

    return f"Google Calendar linked successfully for user {user_id}."
