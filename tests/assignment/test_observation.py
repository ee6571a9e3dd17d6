"""Tests for combining the two dependent reads into an Observation."""

import pytest

from src.vpp.api.exceptions import NotFoundError, ServerError
from src.vpp.api.query_cache import QueryResult
from src.vpp.assignment.domain.entities import LicenseApp, ObservationKind, VppInfo
from src.vpp.assignment.domain.observation import combine_observation

NOT_CONFIGURED = NotFoundError("Resource Not Found", reason="MDMConfigAsset was not found")

ZOOM = LicenseApp(id="546505307", display_name="Zoom")
SLACK = LicenseApp(id="803453959", display_name="Slack")

STATUS_OK = QueryResult.success(VppInfo(org_name="Acme"))
PENDING = QueryResult.pending()


class TestCombineObservation:

    @pytest.mark.parametrize("status", [None, PENDING])
    def test_status_not_resolved_is_loading(self, status):
        assert combine_observation(status, None).kind == ObservationKind.LOADING
        assert combine_observation(status, QueryResult.success([ZOOM])).kind == ObservationKind.LOADING

    def test_not_configured_ignores_catalog(self):
        status = QueryResult.failure(NOT_CONFIGURED)

        for catalog in (None, PENDING, QueryResult.success([ZOOM]), QueryResult.failure(ServerError("x"))):
            observation = combine_observation(status, catalog)
            assert observation.kind == ObservationKind.NOT_CONFIGURED
            assert observation.catalog is None

    def test_other_status_failure_is_errored(self):
        observation = combine_observation(QueryResult.failure(ServerError("boom")), None)

        assert observation.kind == ObservationKind.ERRORED
        assert isinstance(observation.error, ServerError)

    @pytest.mark.parametrize("catalog", [None, PENDING])
    def test_catalog_not_resolved_is_loading(self, catalog):
        assert combine_observation(STATUS_OK, catalog).kind == ObservationKind.LOADING

    def test_catalog_failure_is_errored(self):
        observation = combine_observation(STATUS_OK, QueryResult.failure(ServerError("boom")))
        assert observation.kind == ObservationKind.ERRORED

    def test_catalog_not_found_sentinel_is_still_errored(self):
        # Only the status read can report a missing VPP token
        observation = combine_observation(STATUS_OK, QueryResult.failure(NOT_CONFIGURED))
        assert observation.kind == ObservationKind.ERRORED

    def test_ready_keeps_order(self):
        observation = combine_observation(STATUS_OK, QueryResult.success([SLACK, ZOOM]))

        assert observation.kind == ObservationKind.READY
        assert [app.display_name for app in observation.catalog] == ["Slack", "Zoom"]

    def test_empty_catalog_is_ready(self):
        observation = combine_observation(STATUS_OK, QueryResult.success([]))

        assert observation.kind == ObservationKind.READY
        assert observation.catalog == ()
