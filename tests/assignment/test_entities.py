"""Tests for assignment domain entities."""

import pytest

from src.vpp.assignment.domain.entities import (
    LicenseApp,
    Observation,
    ObservationKind,
    OutcomeKind,
    SelectionState,
    SubmissionOutcome,
    VppInfo,
)


class TestLicenseApp:
    """Tests for LicenseApp entity."""

    def test_identity_is_app_store_id(self):
        a = LicenseApp(id="803453959", display_name="Slack")
        b = LicenseApp(id="803453959", display_name="Slack for iPad", icon_url="x")

        assert a == b
        assert hash(a) == hash(b)
        assert a != LicenseApp(id="546505307", display_name="Slack")

    def test_numeric_id_is_normalized(self):
        assert LicenseApp(id=546505307, display_name="Zoom").id == "546505307"

    def test_missing_display_fields(self):
        app = LicenseApp(id="1", display_name=None, icon_url=None)

        assert app.display_name == ""
        assert app.icon_url == ""

    def test_from_api(self):
        app = LicenseApp.from_api({
            "app_store_id": "546505307",
            "name": "Zoom",
            "icon_url": "https://example.com/zoom.png",
            "latest_version": "6.1.0",
            "platform": "ios",
        })

        assert app.id == "546505307"
        assert app.display_name == "Zoom"
        assert app.latest_version == "6.1.0"
        assert app.platform == "ios"

    def test_from_api_requires_id(self):
        with pytest.raises(KeyError):
            LicenseApp.from_api({"name": "No id"})


class TestVppInfo:

    def test_from_api(self):
        info = VppInfo.from_api({"org_name": "Acme", "renew_date": "2027-03-01", "location": "HQ"})
        assert info.org_name == "Acme"
        assert info.location == "HQ"

    def test_from_empty_payload(self):
        assert VppInfo.from_api(None) == VppInfo()


class TestObservation:
    """Tests for Observation entity."""

    def test_ready_freezes_catalog(self):
        observation = Observation.ready([LicenseApp(id="1", display_name="A")])

        assert observation.kind == ObservationKind.READY
        assert isinstance(observation.catalog, tuple)
        assert observation.is_ready

    def test_find(self):
        zoom = LicenseApp(id="546505307", display_name="Zoom")
        observation = Observation.ready([zoom])

        assert observation.find("546505307") is zoom
        assert observation.find(546505307) is zoom
        assert observation.find("0") is None

    def test_find_without_catalog(self):
        assert Observation.loading().find("1") is None


class TestSelectionState:

    def test_submit_enabled_follows_selection(self):
        assert SelectionState().submit_enabled is False
        assert SelectionState(selected=LicenseApp(id="1", display_name="A")).submit_enabled is True


class TestSubmissionOutcome:

    def test_success(self):
        outcome = SubmissionOutcome.success("Zoom")
        assert outcome.is_success
        assert outcome.app_name == "Zoom"

    def test_duplicate_keeps_reason(self):
        outcome = SubmissionOutcome.duplicate("License already assigned to team")
        assert outcome.kind == OutcomeKind.DUPLICATE_ASSIGNMENT
        assert outcome.reason == "License already assigned to team"
        assert not outcome.is_success

    def test_generic_failure(self):
        assert SubmissionOutcome.generic_failure().kind == OutcomeKind.GENERIC_FAILURE
