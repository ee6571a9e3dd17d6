"""Observe Catalog use case.

Runs the two dependent reads behind the license view:

1. VPP status, cached under a fixed key shared by every team
2. App Store apps for the active team, cached under ``("vppSoftware", team_id)``,
   issued only after (1) succeeded and only while the view is active

and exposes their combined state as a single Observation.
"""

import logging
import os
from typing import Optional

from ...api.query_cache import QueryCache, QueryKey
from ...api.resilience import RetryPolicy
from ..domain.entities import Observation
from ..domain.errors import is_not_configured
from ..domain.observation import combine_observation
from ..domain.ports import IVppRepository

logger = logging.getLogger(__name__)

STATUS_QUERY_KEY: QueryKey = ("vppInfo",)
CATALOG_QUERY_NAME = "vppSoftware"


def catalog_query_key(team_id: int) -> QueryKey:
    return (CATALOG_QUERY_NAME, team_id)


def default_retry_policy() -> RetryPolicy:
    """RetryPolicy from VPP_QUERY_MAX_RETRIES (default 3)."""
    raw = os.getenv("VPP_QUERY_MAX_RETRIES", "3")
    try:
        max_retries = int(raw)
    except ValueError:
        logger.warning(f"Invalid VPP_QUERY_MAX_RETRIES={raw!r}, using 3")
        max_retries = 3
    return RetryPolicy(max_retries=max_retries, is_permanent=is_not_configured)


class DependentQueryOrchestrator:
    """Gate the catalog read on the VPP status read.

    The orchestrator remembers the active team. A catalog response that
    arrives after the active team changed stays under its own cache key and
    never shows up in the projection of the new team.

    Attributes:
        repository: Source of the two reads
        cache: QueryCache holding both results
        retry_policy: Policy applied to each read independently
        enabled: Whether the containing view is active
    """

    def __init__(
        self,
        repository: IVppRepository,
        cache: Optional[QueryCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
        enabled: bool = True,
    ):
        self.repository = repository
        self.cache = cache or QueryCache()
        self.retry_policy = retry_policy or default_retry_policy()
        self.enabled = enabled
        self._team_id: Optional[int] = None

    @property
    def team_id(self) -> Optional[int]:
        return self._team_id

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    @property
    def current(self) -> Observation:
        """Projection of the cached results for the active team."""
        if self._team_id is None or not self.enabled:
            return Observation.loading()
        return combine_observation(
            self.cache.peek(STATUS_QUERY_KEY),
            self.cache.peek(catalog_query_key(self._team_id)),
        )

    async def observe(self, team_id: int) -> Observation:
        """Make ``team_id`` the active team and resolve its observation.

        Args:
            team_id: Team whose licenses are listed

        Returns:
            The combined Observation. If the active team changed while the
            reads were in flight, the projection of the new team instead.
        """
        self._team_id = team_id
        if not self.enabled:
            return Observation.loading()

        status = await self.cache.fetch(
            STATUS_QUERY_KEY,
            self.repository.get_vpp_info,
            retry_policy=self.retry_policy,
        )
        if self._team_id != team_id:
            return self._discard_stale(team_id)

        if not status.is_success:
            observation = combine_observation(status, None)
            logger.info(f"VPP status unavailable for team {team_id}: {observation.kind.value}")
            return observation

        if not self.enabled:
            return Observation.loading()

        async def fetch_catalog():
            return await self.repository.list_app_store_apps(team_id)

        catalog = await self.cache.fetch(
            catalog_query_key(team_id),
            fetch_catalog,
            retry_policy=self.retry_policy,
        )
        if self._team_id != team_id:
            return self._discard_stale(team_id)

        return combine_observation(status, catalog)

    def invalidate_catalog(self, team_id: int) -> None:
        """Drop the cached catalog of ``team_id`` so the next observe refetches."""
        self.cache.invalidate(catalog_query_key(team_id))

    def _discard_stale(self, team_id: int) -> Observation:
        logger.debug(
            f"Ignoring response for team {team_id}; active team is now {self._team_id}"
        )
        return self.current
