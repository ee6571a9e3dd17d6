#!/usr/bin/env python3
"""Apple MDM / VPP endpoints of the device-management backend.

This module provides the MDMAppleAPI class wrapping the three calls the
license workflow needs:

    - get_vpp_info: Is a VPP (Volume Purchasing Program) token configured?
    - get_vpp_apps: App Store apps purchasable for a team and not yet added
    - add_vpp_app: Add a purchased App Store app to a team

API Details:
    - VPP info: GET /api/latest/fleet/vpp
      A missing token answers 404 with "MDMConfigAsset was not found"
    - App list: GET /api/latest/fleet/software/app_store_apps?team_id=N
    - Add app:  POST /api/latest/fleet/software/app_store_apps

Example:
    async with FleetClient() as client:
        api = MDMAppleAPI(client)
        info = await api.get_vpp_info()
        apps = await api.get_vpp_apps(team_id=5)
        await api.add_vpp_app(team_id=5, app_store_id="803453959")
"""
import logging
from typing import Any

from .client import FleetClient

logger = logging.getLogger(__name__)


class MDMAppleAPI:
    """VPP read and write operations.

    Read operations return the decoded JSON payloads untouched; conversion
    into domain entities happens in the assignment adapters.

    Attributes:
        client: FleetClient instance for API communication
    """

    VPP_INFO_ENDPOINT = "/api/latest/fleet/vpp"
    APP_STORE_APPS_ENDPOINT = "/api/latest/fleet/software/app_store_apps"

    def __init__(self, client: FleetClient):
        self.client = client

    async def get_vpp_info(self) -> dict[str, Any]:
        """Fetch the VPP token metadata (org name, renew date, location)."""
        return await self.client.get(self.VPP_INFO_ENDPOINT)

    async def get_vpp_apps(self, team_id: int) -> list[dict[str, Any]]:
        """Fetch App Store apps available to a team.

        Args:
            team_id: Team to list apps for

        Returns:
            List of app dicts (``app_store_id``, ``name``, ``icon_url``, ...).
            An empty list is a valid answer.
        """
        data = await self.client.get(
            self.APP_STORE_APPS_ENDPOINT,
            params={"team_id": team_id},
        )
        apps = data.get("app_store_apps") or []
        logger.debug(f"Fetched {len(apps)} App Store apps for team {team_id}")
        return apps

    async def add_vpp_app(self, team_id: int, app_store_id: str) -> dict[str, Any]:
        """Add an App Store app to a team.

        Args:
            team_id: Target team
            app_store_id: App Store identifier of the purchased app

        Returns:
            Response payload (usually empty)
        """
        logger.info(f"Adding App Store app {app_store_id} to team {team_id}")
        return await self.client.post(
            self.APP_STORE_APPS_ENDPOINT,
            json_body={"app_store_id": app_store_id, "team_id": team_id},
        )
