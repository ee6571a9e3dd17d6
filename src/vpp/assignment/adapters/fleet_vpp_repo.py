"""Backend VPP repository adapter.

This adapter wraps MDMAppleAPI to implement the IVppRepository
interface, converting API payloads into domain entities.
"""

import logging

from ...api.mdm_apple import MDMAppleAPI
from ..domain.entities import LicenseApp, VppInfo
from ..domain.ports import IVppRepository

logger = logging.getLogger(__name__)


class FleetVppRepository(IVppRepository):
    """Adapter wrapping MDMAppleAPI.

    Errors from the API propagate unchanged so the caller can classify
    them; only well-formed payloads are converted here.
    """

    def __init__(self, api: MDMAppleAPI):
        """Initialize with a configured MDMAppleAPI.

        Args:
            api: MDMAppleAPI bound to an open FleetClient
        """
        self.api = api

    async def get_vpp_info(self) -> VppInfo:
        data = await self.api.get_vpp_info()
        return VppInfo.from_api(data)

    async def list_app_store_apps(self, team_id: int) -> list[LicenseApp]:
        apps = []
        for item in await self.api.get_vpp_apps(team_id):
            if not isinstance(item, dict) or item.get("app_store_id") in (None, ""):
                logger.warning(f"Skipping App Store app without app_store_id: {item!r}")
                continue
            apps.append(LicenseApp.from_api(item))
        return apps

    async def add_app_store_app(self, team_id: int, app_id: str) -> None:
        await self.api.add_vpp_app(team_id, app_id)
