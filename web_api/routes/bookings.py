"""
Booking push routes.

Endpoints:
- POST /plugin/google-calendar-sync/bookings/push - Webhook: create event for a booking
- GET /plugin/google-calendar-sync/bookings/push/{booking_id} - Admin manual push
"""

import hmac
import logging
import sys
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import PlainTextResponse

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from core.bookings import BookingNotFoundError, HostUserNotFoundError, push_booking
from core.calendar.events import NotLinkedError, extract_meet_link
from core.constants import PLUGIN_NAME
from core.plugin_config import ConfigurationMissingError, PluginConfig
from web_api.auth import require_admin
from web_api.dependencies import get_request_config, get_stored_config_values

router = APIRouter(prefix=f"/plugin/{PLUGIN_NAME}/bookings", tags=["bookings"])

logger = logging.getLogger(__name__)


def _parse_booking_id(value: Any) -> int:
    """
    Positive int booking id, or 400.

    Accepts an int or a string of decimal digits. Floats, booleans and
    anything else are rejected rather than coerced.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        booking_id = value
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        booking_id = int(value)
    else:
        logger.warning(f"Rejected booking_id {value!r}")
        raise HTTPException(status_code=400, detail="Missing booking_id")
    if booking_id <= 0:
        logger.warning(f"Rejected booking_id {value!r}")
        raise HTTPException(status_code=400, detail="Missing booking_id")
    return booking_id


async def _push(config: PluginConfig, booking_id: int, source: str) -> dict:
    """Run a push and translate domain errors into HTTP responses."""
    try:
        return await push_booking(config, booking_id)
    except BookingNotFoundError:
        logger.warning(f"{source} push: booking {booking_id} not found")
        raise HTTPException(status_code=404, detail="Booking not found")
    except HostUserNotFoundError as e:
        logger.warning(f"{source} push refused: {e}")
        raise HTTPException(status_code=404, detail="Host user not found")
    except NotLinkedError as e:
        logger.warning(f"{source} push for booking {booking_id} refused: {e}")
        raise HTTPException(status_code=403, detail=str(e))
    except ConfigurationMissingError as e:
        logger.error(f"{source} push for booking {booking_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Google Calendar not configured")
    except Exception as e:
        logger.exception(f"{source} push for booking {booking_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Push failed")


async def verify_webhook_secret(
    x_webhook_secret: str | None = Header(None),
    stored: dict[str, Any] = Depends(get_stored_config_values),
) -> None:
    """
    Require the X-Webhook-Secret header to match GOOGLE_SYNC_SECRET.

    Checked against the raw stored value so the caller is authenticated
    before the rest of the configuration is validated.
    """
    expected = stored.get("GOOGLE_SYNC_SECRET")
    if not x_webhook_secret or not expected or not hmac.compare_digest(
        x_webhook_secret.encode(), str(expected).encode()
    ):
        logger.warning("Booking push rejected: bad webhook secret")
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.post("/push")
async def push_booking_webhook(
    request: Request,
    _authorized: None = Depends(verify_webhook_secret),
    config: PluginConfig = Depends(get_request_config),
) -> dict[str, Any]:
    """
    Create the calendar event for a booking (internal webhook).

    Body: {"booking_id": <int>}
    """
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body") from None
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Missing booking_id")

    booking_id = _parse_booking_id(payload.get("booking_id"))
    event = await _push(config, booking_id, source="Webhook")
    meet_link = extract_meet_link(event)

    return {"ok": True, "eventId": event["id"], "meetLink": meet_link or None}


@router.get("/push/{booking_id}", response_class=PlainTextResponse)
async def push_booking_manual(
    booking_id: str,
    admin: dict = Depends(require_admin),
    config: PluginConfig = Depends(get_request_config),
) -> str:
    """Admin-only manual push of a single booking."""
    event = await _push(config, _parse_booking_id(booking_id), source="Manual")
    meet_link = extract_meet_link(event)

    message = f"Pushed. Event ID: {event['id']}"
    if meet_link:
        message += f"\nMeet link: {meet_link}"
    return message
