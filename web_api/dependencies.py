"""
Shared FastAPI dependencies.

Plugin configuration is resolved here, once per request, and handed to the
core functions as a plain object.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from fastapi import HTTPException

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.constants import PLUGIN_NAME
from core.database import get_connection
from core.field_mapping import FieldMappingError
from core.plugin_config import PluginConfig, get_plugin_config
from core.queries.plugin_config import get_plugin_config_values

logger = logging.getLogger(__name__)


async def get_stored_config_values() -> dict[str, Any]:
    """Raw stored settings for this plugin, without mapping validation."""
    async with get_connection() as conn:
        return await get_plugin_config_values(conn, PLUGIN_NAME)


async def get_request_config() -> PluginConfig:
    """Load the validated plugin configuration for the current request."""
    try:
        async with get_connection() as conn:
            return await get_plugin_config(conn)
    except FieldMappingError as e:
        logger.error(f"Invalid field mapping in plugin configuration: {e}")
        raise HTTPException(status_code=500, detail="Plugin configuration is invalid")
