"""Tests for the selection state machine."""

from src.vpp.assignment.domain.entities import LicenseApp
from src.vpp.assignment.domain.selection import SelectionStateMachine

ZOOM = LicenseApp(id="546505307", display_name="Zoom")
SLACK = LicenseApp(id="803453959", display_name="Slack")


class TestSelectionStateMachine:

    def test_starts_empty(self):
        machine = SelectionStateMachine()

        assert machine.selected is None
        assert machine.submit_enabled is False
        assert machine.can_submit is False

    def test_select_enables_submit(self):
        machine = SelectionStateMachine()

        assert machine.select(ZOOM) is True
        assert machine.selected == ZOOM
        assert machine.submit_enabled is True

    def test_reselect_is_noop(self):
        machine = SelectionStateMachine()
        machine.select(ZOOM)
        state = machine.state

        assert machine.select(LicenseApp(id="546505307", display_name="Zoom")) is False
        assert machine.state is state

    def test_switch_selection(self):
        machine = SelectionStateMachine()
        machine.select(ZOOM)

        assert machine.select(SLACK) is True
        assert machine.selected == SLACK
        assert machine.submit_enabled is True

    def test_submit_enabled_iff_selected(self):
        machine = SelectionStateMachine()
        for app in (ZOOM, SLACK, SLACK, ZOOM):
            machine.select(app)
            assert machine.submit_enabled == (machine.selected is not None)

    def test_submitting_blocks_can_submit(self):
        machine = SelectionStateMachine()
        machine.select(ZOOM)

        machine.begin_submit()
        assert machine.submitting is True
        assert machine.submit_enabled is True
        assert machine.can_submit is False

        machine.end_submit()
        assert machine.can_submit is True
