"""Tests for plugin administration endpoints."""

import pytest
from unittest.mock import AsyncMock, patch

from core.field_mapping import FieldMappingError
from core.plugin_config import PluginConfig

CONFIG_URL = "/plugin/google-calendar-sync/config"
INSTALL_URL = "/plugin/google-calendar-sync/install"


@pytest.fixture
def mock_transaction():
    with patch("web_api.routes.config.get_transaction") as mock_get_tx:
        mock_conn = AsyncMock()
        mock_get_tx.return_value.__aenter__.return_value = mock_conn
        mock_get_tx.return_value.__aexit__.return_value = None
        yield mock_conn


class TestGetConfig:
    def test_requires_admin(self, client, login):
        login(role="staff")

        response = client.get(CONFIG_URL)

        assert response.status_code == 403

    def test_returns_masked_config(self, client, login):
        login(user_id=1, role="admin")

        response = client.get(CONFIG_URL)

        assert response.status_code == 200
        data = response.json()
        assert data["config"]["GOOGLE_CLIENT_ID"] == "client-id"
        assert data["config"]["GOOGLE_CLIENT_SECRET"] == "****cret"
        assert data["config"]["USERS_TABLE"] == "users"
        assert data["redirect_uri"] == (
            "https://book.example.com/plugin/google-calendar-sync/oauth2/callback"
        )


class TestUpdateConfig:
    def test_saves_given_fields(self, client, login, mock_transaction):
        login(user_id=1, role="admin")
        saved = PluginConfig.from_values({"USERS_TABLE": "members"})

        with patch(
            "web_api.routes.config.save_plugin_config",
            new_callable=AsyncMock,
            return_value=saved,
        ) as mock_save:
            response = client.put(
                CONFIG_URL,
                json={"USERS_TABLE": "members", "GCAL_GENERATE_MEET_IF_EMPTY": False},
            )

        assert response.status_code == 200
        assert response.json()["config"]["USERS_TABLE"] == "members"
        mock_save.assert_awaited_once_with(
            mock_transaction,
            {"USERS_TABLE": "members", "GCAL_GENERATE_MEET_IF_EMPTY": False},
        )

    def test_invalid_mapping_rejected(self, client, login, mock_transaction):
        login(user_id=1, role="admin")

        with patch(
            "web_api.routes.config.save_plugin_config",
            new_callable=AsyncMock,
            side_effect=FieldMappingError("USER_FIELDS must map refresh_token"),
        ):
            response = client.put(CONFIG_URL, json={"USER_FIELDS": ",calendar_id"})

        assert response.status_code == 400
        assert "refresh_token" in response.json()["detail"]

    def test_requires_admin(self, client, login):
        login(role="staff")

        with patch(
            "web_api.routes.config.save_plugin_config", new_callable=AsyncMock
        ) as mock_save:
            response = client.put(CONFIG_URL, json={"USERS_TABLE": "members"})

        assert response.status_code == 403
        mock_save.assert_not_called()


class TestInstall:
    def test_provisions_schema(self, client, login, plugin_config, mock_transaction):
        login(user_id=1, role="admin")
        report = {"bookings_table_created": True, "user_columns_added": ["calendar_id"]}

        with patch(
            "web_api.routes.config.provision_schema",
            new_callable=AsyncMock,
            return_value=report,
        ) as mock_provision:
            response = client.post(INSTALL_URL)

        assert response.status_code == 200
        assert response.json() == {"status": "ok", **report}
        mock_provision.assert_awaited_once_with(mock_transaction, plugin_config)

    def test_failure_reported(self, client, login, mock_transaction):
        login(user_id=1, role="admin")

        with patch(
            "web_api.routes.config.provision_schema",
            new_callable=AsyncMock,
            side_effect=RuntimeError("permission denied"),
        ):
            response = client.post(INSTALL_URL)

        assert response.status_code == 500
        assert response.json()["detail"] == "Install failed"
