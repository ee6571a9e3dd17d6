"""Selection state machine for the license list.

States::

    EMPTY --select(app)--> CHOSEN(app) --select(other)--> CHOSEN(other)

There is no deselect. Re-selecting the chosen license leaves the state
untouched. ``submit_enabled`` follows from the state and cannot be set.

The machine also tracks whether a submission is in flight so the submit
action can be disabled until it settles.
"""

import logging
from typing import Optional

from .entities import LicenseApp, SelectionState

logger = logging.getLogger(__name__)


class SelectionStateMachine:
    """Owns the SelectionState of one interaction."""

    def __init__(self):
        self._state = SelectionState()
        self._submitting = False

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selected(self) -> Optional[LicenseApp]:
        return self._state.selected

    @property
    def submit_enabled(self) -> bool:
        return self._state.submit_enabled

    @property
    def submitting(self) -> bool:
        return self._submitting

    @property
    def can_submit(self) -> bool:
        """A license is chosen and no submission is in flight."""
        return self.submit_enabled and not self._submitting

    def select(self, app: LicenseApp) -> bool:
        """Choose ``app``.

        Returns:
            True if the state changed, False for a repeated selection.
        """
        if self._state.selected == app:
            return False
        self._state = SelectionState(selected=app)
        logger.debug(f"Selected App Store app {app.id} ({app.display_name})")
        return True

    def begin_submit(self) -> None:
        self._submitting = True

    def end_submit(self) -> None:
        self._submitting = False
