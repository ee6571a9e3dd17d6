"""Port interfaces for App Store license assignment.

These are abstract interfaces (ports) that define how the domain
interacts with external systems. Concrete implementations (adapters)
are provided in the adapters module.

This follows the Hexagonal Architecture pattern.
"""

from abc import ABC, abstractmethod

from .entities import FlashLevel, LicenseApp, VppInfo


class IVppRepository(ABC):
    """Port for the VPP reads and the assignment write.

    Implementations raise on failure; the caller classifies the exception.
    """

    @abstractmethod
    async def get_vpp_info(self) -> VppInfo:
        """Fetch the configured VPP token metadata.

        Raises:
            Exception: whose reason contains the not-configured sentinel
                when no VPP token exists
        """
        ...

    @abstractmethod
    async def list_app_store_apps(self, team_id: int) -> list[LicenseApp]:
        """List purchased apps not yet added to ``team_id``.

        Args:
            team_id: Team to list apps for

        Returns:
            Ordered list of LicenseApp (may be empty)
        """
        ...

    @abstractmethod
    async def add_app_store_app(self, team_id: int, app_id: str) -> None:
        """Add a purchased app to a team.

        Args:
            team_id: Target team
            app_id: App Store id of the license
        """
        ...


class INotifier(ABC):
    """Port for flash notifications."""

    @abstractmethod
    def render_flash(self, level: FlashLevel, message: str) -> None:
        """Show a flash message."""
        ...


class INavigator(ABC):
    """Port for post-action navigation."""

    @abstractmethod
    def push(self, url: str) -> None:
        """Navigate to ``url`` (path plus query string)."""
        ...
