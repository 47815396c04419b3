# web_api/tests/conftest.py
"""Pytest fixtures for web API tests.

Routes receive their plugin configuration through the get_stored_config_values
and get_request_config dependencies; these fixtures override both with
in-memory values so API tests run without a database.
"""

import pytest
from unittest.mock import patch

from fastapi.testclient import TestClient

from core.plugin_config import PluginConfig
from web_api.auth import create_jwt
from web_api.dependencies import get_request_config, get_stored_config_values

WEBHOOK_SECRET = "hook-secret"


@pytest.fixture(autouse=True)
def _jwt_secret():
    """Ensure JWT_SECRET is set so sessions can be issued and verified."""
    with patch("web_api.auth.JWT_SECRET", "test-secret"):
        yield


@pytest.fixture
def stored_values():
    """Stored settings of a fully configured plugin with default table mappings."""
    return {
        "GOOGLE_CLIENT_ID": "client-id",
        "GOOGLE_CLIENT_SECRET": "client-secret",
        "GOOGLE_SYNC_SECRET": WEBHOOK_SECRET,
        "BASE_URL": "https://book.example.com",
    }


@pytest.fixture
def plugin_config(stored_values):
    return PluginConfig.from_values(stored_values)


@pytest.fixture
def client(stored_values, plugin_config):
    """Test client for the FastAPI app with the plugin config overridden."""
    from main import app

    app.dependency_overrides[get_stored_config_values] = lambda: stored_values
    app.dependency_overrides[get_request_config] = lambda: plugin_config
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Attach a session cookie for a host user to the test client."""

    def _login(user_id=7, role=None):
        client.cookies.set("session", create_jwt(user_id, role=role))

    return _login
