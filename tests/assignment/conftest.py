"""Shared fakes for assignment tests."""

import asyncio
import sys

import pytest

sys.path.insert(0, str(__file__).rsplit("/tests", 1)[0])
from src.vpp.api.exceptions import NotFoundError
from src.vpp.api.query_cache import QueryCache
from src.vpp.assignment.domain.entities import LicenseApp, VppInfo
from src.vpp.assignment.domain.ports import IVppRepository

ZOOM = LicenseApp(id="546505307", display_name="Zoom")
SLACK = LicenseApp(id="803453959", display_name="Slack")


class FakeVppRepository(IVppRepository):
    """In-memory repository with optional per-team gates on the catalog read."""

    def __init__(self, catalogs=None):
        self.catalogs = catalogs if catalogs is not None else {5: [SLACK, ZOOM]}
        self.status_error = None
        self.catalog_error = None
        self.add_error = None
        self.gates: dict[int, asyncio.Event] = {}
        self.add_gate = None
        self.status_calls = 0
        self.catalog_calls: list[int] = []
        self.added: list[tuple[int, str]] = []

    async def get_vpp_info(self) -> VppInfo:
        self.status_calls += 1
        if self.status_error:
            raise self.status_error
        return VppInfo(org_name="Acme")

    async def list_app_store_apps(self, team_id: int) -> list[LicenseApp]:
        self.catalog_calls.append(team_id)
        gate = self.gates.get(team_id)
        if gate is not None:
            await gate.wait()
        if self.catalog_error:
            raise self.catalog_error
        return list(self.catalogs.get(team_id, []))

    async def add_app_store_app(self, team_id: int, app_id: str) -> None:
        if self.add_gate is not None:
            await self.add_gate.wait()
        self.added.append((team_id, app_id))
        if self.add_error:
            raise self.add_error
        self.catalogs[team_id] = [a for a in self.catalogs.get(team_id, []) if a.id != app_id]


@pytest.fixture
def repository():
    return FakeVppRepository()


@pytest.fixture
def cache():
    return QueryCache(stale_time=30, retry_delay=0)


@pytest.fixture
def not_configured_error():
    return NotFoundError("Resource Not Found", reason="MDMConfigAsset was not found")
