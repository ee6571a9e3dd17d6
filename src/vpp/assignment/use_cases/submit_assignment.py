"""Submit Assignment use case.

Adds the selected App Store app to a team and reports the result:

1. Issue the write once (no retry)
2. Classify a failure into duplicate or generic
3. Flash a notification; on success also navigate to the team's
   installable software
4. Always call the exit callback, whatever happened before
"""

import logging
from typing import Callable, Optional

from ...api.exceptions import SubmissionInProgressError
from ...api.urls import software_titles_url
from ..domain.entities import (
    ErrorCategory,
    FlashLevel,
    LicenseApp,
    OutcomeKind,
    SubmissionOutcome,
)
from ..domain.errors import classify_submission
from ..domain.ports import INavigator, INotifier, IVppRepository

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Couldn't add software. Please try again."


def success_message(app_name: str) -> str:
    return f"{app_name} successfully added. Go to Host details page to install software."


class SubmissionController:
    """Execute the assignment write and deliver its outcome.

    ``submit`` only talks to the backend and returns a SubmissionOutcome.
    ``deliver`` turns an outcome into notifications and navigation.
    ``submit_and_exit`` chains both and guarantees the exit callback.
    """

    def __init__(
        self,
        repository: IVppRepository,
        notifier: INotifier,
        navigator: INavigator,
        on_success: Optional[Callable[[int, LicenseApp], None]] = None,
    ):
        """Initialize the controller.

        Args:
            repository: Backend access for the write
            notifier: Flash message sink
            navigator: Router used after a successful write
            on_success: Optional hook called with (team_id, app) after a
                successful write, before notifications
        """
        self.repository = repository
        self.notifier = notifier
        self.navigator = navigator
        self.on_success = on_success
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def submit(self, team_id: int, selected: Optional[LicenseApp]) -> SubmissionOutcome:
        """Add ``selected`` to ``team_id`` and classify the result.

        Raises:
            ValueError: If nothing is selected
            SubmissionInProgressError: If another submit has not finished
        """
        if selected is None:
            raise ValueError("Cannot submit without a selected App Store app")
        if self._in_flight:
            raise SubmissionInProgressError(team_id=team_id)

        self._in_flight = True
        try:
            await self.repository.add_app_store_app(team_id, selected.id)
        except Exception as e:
            category, reason = classify_submission(e)
            logger.warning(
                f"Adding App Store app {selected.id} to team {team_id} failed "
                f"({category.value}): {e}"
            )
            if category == ErrorCategory.DUPLICATE_ASSIGNMENT:
                return SubmissionOutcome.duplicate(reason, error=e)
            return SubmissionOutcome.generic_failure(error=e)
        finally:
            self._in_flight = False

        logger.info(f"Added App Store app {selected.id} to team {team_id}")
        if self.on_success:
            self.on_success(team_id, selected)
        return SubmissionOutcome.success(selected.display_name)

    def deliver(self, team_id: int, outcome: SubmissionOutcome) -> None:
        """Flash the outcome and, on success, navigate to the software list."""
        if outcome.kind == OutcomeKind.SUCCESS:
            self.notifier.render_flash(FlashLevel.SUCCESS, success_message(outcome.app_name or ""))
            self.navigator.push(software_titles_url(team_id, available_for_install=True))
        elif outcome.kind == OutcomeKind.DUPLICATE_ASSIGNMENT:
            self.notifier.render_flash(FlashLevel.ERROR, outcome.reason or GENERIC_FAILURE_MESSAGE)
        else:
            self.notifier.render_flash(FlashLevel.ERROR, GENERIC_FAILURE_MESSAGE)

    async def submit_and_exit(
        self,
        team_id: int,
        selected: Optional[LicenseApp],
        on_exit: Callable[[], None],
    ) -> SubmissionOutcome:
        """Submit, deliver the outcome, then call ``on_exit`` exactly once.

        A rejected call (no selection, submission already in flight) raises
        before anything is sent and does not exit.
        """
        if selected is None:
            raise ValueError("Cannot submit without a selected App Store app")
        if self._in_flight:
            raise SubmissionInProgressError(team_id=team_id)

        outcome: Optional[SubmissionOutcome] = None
        try:
            outcome = await self.submit(team_id, selected)
            self.deliver(team_id, outcome)
        finally:
            on_exit()
        return outcome
