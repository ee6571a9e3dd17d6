"""App Store (VPP) session use case.

One session is one visit to the "add App Store app" view: it loads the
license catalog for a team, tracks the selection and submits it. The
session ends on submit or cancel; after that it refuses further use.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ...api.exceptions import SessionClosedError, SubmissionInProgressError
from ...api.query_cache import QueryCache
from ...api.urls import ENABLE_VPP_PATH
from ..domain.entities import LicenseApp, Observation, ObservationKind, SubmissionOutcome
from ..domain.ports import INavigator, INotifier, IVppRepository
from ..domain.selection import SelectionStateMachine
from .observe_catalog import DependentQueryOrchestrator
from .submit_assignment import SubmissionController

logger = logging.getLogger(__name__)

DESCRIPTION = "Apple App Store apps purchased via Apple Business Manager."
ENABLE_VPP_TITLE = "Volume Purchasing Program (VPP) isn't enabled."
ENABLE_VPP_DESCRIPTION = "To add App Store apps, first enable VPP."
ENABLE_VPP_LINK_TEXT = "Enable VPP"
NO_APPS_TITLE = "You don't have any App Store apps"
NO_APPS_DESCRIPTION = (
    "You must purchase apps in ABM. App Store apps that are already added "
    "to this team are not listed."
)
DATA_ERROR_TITLE = "Something's gone wrong."
DATA_ERROR_DESCRIPTION = "Refresh the page or try again later."


class ViewState(str, Enum):
    """Which block the view renders."""

    LOADING = "loading"
    ENABLE_VPP = "enable_vpp"
    ERROR = "error"
    EMPTY = "empty"
    LIST = "list"


@dataclass(frozen=True)
class AppListItem:
    app: LicenseApp
    selected: bool = False


@dataclass(frozen=True)
class VppView:
    """Everything needed to draw the view, with no rendering concerns."""

    state: ViewState
    description: str = DESCRIPTION
    items: tuple[AppListItem, ...] = ()
    title: Optional[str] = None
    message: Optional[str] = None
    link_url: Optional[str] = None
    link_text: Optional[str] = None
    submit_disabled: bool = True


def build_view(
    observation: Observation,
    selected: Optional[LicenseApp] = None,
    submit_disabled: bool = True,
) -> VppView:
    """Pick the view block for an observation."""
    if observation.kind == ObservationKind.LOADING:
        return VppView(state=ViewState.LOADING, submit_disabled=submit_disabled)

    if observation.kind == ObservationKind.NOT_CONFIGURED:
        return VppView(
            state=ViewState.ENABLE_VPP,
            title=ENABLE_VPP_TITLE,
            message=ENABLE_VPP_DESCRIPTION,
            link_url=ENABLE_VPP_PATH,
            link_text=ENABLE_VPP_LINK_TEXT,
            submit_disabled=submit_disabled,
        )

    if observation.kind == ObservationKind.ERRORED:
        return VppView(
            state=ViewState.ERROR,
            title=DATA_ERROR_TITLE,
            message=DATA_ERROR_DESCRIPTION,
            submit_disabled=submit_disabled,
        )

    catalog = observation.catalog or ()
    if not catalog:
        return VppView(
            state=ViewState.EMPTY,
            title=NO_APPS_TITLE,
            message=NO_APPS_DESCRIPTION,
            submit_disabled=submit_disabled,
        )

    return VppView(
        state=ViewState.LIST,
        items=tuple(AppListItem(app=app, selected=app == selected) for app in catalog),
        submit_disabled=submit_disabled,
    )


@dataclass
class SessionResult:
    """How a session ended."""

    outcome: Optional[SubmissionOutcome] = None
    cancelled: bool = False
    exited: bool = False


class AppStoreVppSession:
    """One selection-and-submit interaction for a team.

    Args:
        team_id: Team the license is added to
        orchestrator: Dependent reads for the view
        controller: Submission write and outcome delivery
        on_exit: Called exactly once when the session ends
    """

    def __init__(
        self,
        team_id: int,
        orchestrator: DependentQueryOrchestrator,
        controller: SubmissionController,
        on_exit: Optional[Callable[[], None]] = None,
    ):
        self.team_id = team_id
        self.orchestrator = orchestrator
        self.controller = controller
        self.selection = SelectionStateMachine()
        self.result = SessionResult()
        self._on_exit = on_exit
        self._closed = False
        self.orchestrator.enable()

    @classmethod
    def create(
        cls,
        team_id: int,
        repository: IVppRepository,
        notifier: INotifier,
        navigator: INavigator,
        cache: Optional[QueryCache] = None,
        on_exit: Optional[Callable[[], None]] = None,
    ) -> "AppStoreVppSession":
        """Wire a session from its collaborators.

        The query cache may be shared between sessions; the orchestrator
        and the selection are private to this one. A successful write drops
        the team's cached catalog so the added app disappears from the list.
        """
        orchestrator = DependentQueryOrchestrator(repository, cache=cache)
        controller = SubmissionController(
            repository,
            notifier,
            navigator,
            on_success=lambda team, _app: orchestrator.invalidate_catalog(team),
        )
        return cls(team_id, orchestrator, controller, on_exit=on_exit)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def observation(self) -> Observation:
        return self.orchestrator.current

    async def load(self) -> VppView:
        """Resolve the reads for this session's team and render."""
        self._ensure_open()
        await self.orchestrator.observe(self.team_id)
        return self.render()

    def render(self) -> VppView:
        observation = self.orchestrator.current if not self._closed else Observation.loading()
        return build_view(
            observation,
            selected=self.selection.selected,
            submit_disabled=not self.selection.can_submit,
        )

    def select(self, app_id: str) -> bool:
        """Select a catalog entry by App Store id.

        Returns:
            True if the selection changed

        Raises:
            SessionClosedError: After the session ended
            KeyError: If the app is not in the current catalog
        """
        self._ensure_open()
        app = self.orchestrator.current.find(app_id)
        if app is None:
            raise KeyError(f"App Store app {app_id} is not available for team {self.team_id}")
        return self.selection.select(app)

    async def submit(self) -> SubmissionOutcome:
        """Submit the current selection and end the session.

        Raises:
            SessionClosedError: After the session ended
            ValueError: If nothing is selected
            SubmissionInProgressError: While a submission is in flight
        """
        self._ensure_open()
        if not self.selection.submit_enabled:
            raise ValueError("Select an App Store app before adding software")
        if self.selection.submitting:
            raise SubmissionInProgressError(team_id=self.team_id)

        self.selection.begin_submit()
        try:
            outcome = await self.controller.submit_and_exit(
                self.team_id,
                self.selection.selected,
                on_exit=self._exit,
            )
        finally:
            self.selection.end_submit()
        self.result.outcome = outcome
        return outcome

    def cancel(self) -> None:
        """Leave without writing anything."""
        self._ensure_open()
        self.result.cancelled = True
        self._exit()

    def _exit(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.result.exited = True
        self.orchestrator.disable()
        logger.debug(f"App Store VPP session for team {self.team_id} exited")
        if self._on_exit:
            self._on_exit()

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError()
