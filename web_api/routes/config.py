"""
Plugin administration routes.

All endpoints require admin authentication.

Endpoints:
- GET /plugin/google-calendar-sync/config - Current settings (secrets masked)
- PUT /plugin/google-calendar-sync/config - Save the settings form
- POST /plugin/google-calendar-sync/install - Provision host tables
"""

import logging
import sys
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from core.constants import PLUGIN_NAME
from core.database import get_transaction
from core.field_mapping import FieldMappingError
from core.plugin_config import PluginConfig, save_plugin_config
from core.provisioning import provision_schema
from web_api.auth import require_admin
from web_api.dependencies import get_request_config

router = APIRouter(prefix=f"/plugin/{PLUGIN_NAME}", tags=["config"])

logger = logging.getLogger(__name__)


class PluginConfigUpdate(BaseModel):
    """Settings form. Omitted fields keep their stored value."""

    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    BASE_URL: str | None = None
    USERS_TABLE: str | None = None
    BOOKINGS_TABLE: str | None = None
    USERS_ID_FIELD: str | None = None
    BOOKING_FIELDS: str | None = None
    USER_FIELDS: str | None = None
    GOOGLE_SYNC_SECRET: str | None = None
    GCAL_GENERATE_MEET_IF_EMPTY: bool | None = None


@router.get("/config")
async def get_config_endpoint(
    admin: dict = Depends(require_admin),
    config: PluginConfig = Depends(get_request_config),
) -> dict[str, Any]:
    """Current plugin settings, with secrets masked."""
    return {
        "config": config.public_values(),
        "redirect_uri": config.redirect_uri,
    }


@router.put("/config")
async def update_config_endpoint(
    form: PluginConfigUpdate,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    """
    Save the plugin settings form.

    Field mappings are validated before anything is stored.
    """
    updates = form.model_dump(exclude_none=True)

    try:
        async with get_transaction() as conn:
            config = await save_plugin_config(conn, updates)
    except (FieldMappingError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Plugin configuration saved by user {admin.get('sub')}")
    return {
        "status": "updated",
        "config": config.public_values(),
        "redirect_uri": config.redirect_uri,
    }


@router.post("/install")
async def install_endpoint(
    admin: dict = Depends(require_admin),
    config: PluginConfig = Depends(get_request_config),
) -> dict[str, Any]:
    """
    Provision the host tables.

    Creates the bookings table if missing and adds the Google columns to the
    users table. Idempotent.
    """
    try:
        async with get_transaction() as conn:
            report = await provision_schema(conn, config)
    except Exception as e:
        logger.exception(f"Schema provisioning failed: {e}")
        raise HTTPException(status_code=500, detail="Install failed")

    return {"status": "ok", **report}
