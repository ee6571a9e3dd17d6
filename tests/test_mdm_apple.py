"""Tests for MDMAppleAPI and post-action URLs."""

import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

sys.path.insert(0, str(__file__).rsplit("/tests", 1)[0])
from src.vpp.api.mdm_apple import MDMAppleAPI
from src.vpp.api.urls import build_query_string, software_titles_url


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.get = AsyncMock()
    client.post = AsyncMock(return_value={})
    return client


class TestMDMAppleAPI:

    @pytest.mark.asyncio
    async def test_get_vpp_info(self, mock_client):
        mock_client.get.return_value = {"org_name": "Acme", "renew_date": "2027-01-01"}

        info = await MDMAppleAPI(mock_client).get_vpp_info()

        mock_client.get.assert_awaited_once_with("/api/latest/fleet/vpp")
        assert info["org_name"] == "Acme"

    @pytest.mark.asyncio
    async def test_get_vpp_apps(self, mock_client):
        mock_client.get.return_value = {
            "app_store_apps": [{"app_store_id": "1", "name": "Zoom"}],
        }

        apps = await MDMAppleAPI(mock_client).get_vpp_apps(5)

        mock_client.get.assert_awaited_once_with(
            "/api/latest/fleet/software/app_store_apps",
            params={"team_id": 5},
        )
        assert apps == [{"app_store_id": "1", "name": "Zoom"}]

    @pytest.mark.asyncio
    async def test_get_vpp_apps_null_list(self, mock_client):
        mock_client.get.return_value = {"app_store_apps": None}

        assert await MDMAppleAPI(mock_client).get_vpp_apps(5) == []

    @pytest.mark.asyncio
    async def test_add_vpp_app(self, mock_client):
        await MDMAppleAPI(mock_client).add_vpp_app(5, "803453959")

        mock_client.post.assert_awaited_once_with(
            "/api/latest/fleet/software/app_store_apps",
            json_body={"app_store_id": "803453959", "team_id": 5},
        )


class TestUrls:

    def test_software_titles_url(self):
        assert software_titles_url(5) == "/software/titles?team_id=5&available_for_install=true"

    def test_team_zero(self):
        assert software_titles_url(0).startswith("/software/titles?team_id=0&")

    def test_query_string_drops_none(self):
        assert build_query_string({"team_id": None, "available_for_install": False}) == (
            "available_for_install=false"
        )
