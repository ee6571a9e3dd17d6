"""Domain entities for App Store license assignment.

These are pure domain objects with no infrastructure dependencies.
They represent the core business concepts of the assignment workflow.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ErrorCategory(str, Enum):
    """Semantic category of a backend failure."""

    NOT_CONFIGURED = "not_configured"  # No VPP token, read-time only
    DUPLICATE_ASSIGNMENT = "duplicate_assignment"  # Write-time only
    GENERIC = "generic"


class ObservationKind(str, Enum):
    """What the license view can currently show."""

    LOADING = "loading"
    NOT_CONFIGURED = "not_configured"
    ERRORED = "errored"
    READY = "ready"


class OutcomeKind(str, Enum):
    """Result of a single submission."""

    SUCCESS = "success"
    DUPLICATE_ASSIGNMENT = "duplicate_assignment"
    GENERIC_FAILURE = "generic_failure"


class FlashLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class VppInfo:
    """Metadata of the configured VPP token."""

    org_name: Optional[str] = None
    renew_date: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_api(cls, data: Optional[dict[str, Any]]) -> "VppInfo":
        data = data or {}
        return cls(
            org_name=data.get("org_name"),
            renew_date=data.get("renew_date"),
            location=data.get("location"),
        )


@dataclass(frozen=True)
class LicenseApp:
    """An App Store app purchased through VPP.

    Identity is the App Store id: two instances with the same ``id`` are
    the same license even if the display fields differ.
    """

    id: str
    display_name: str = field(compare=False)
    icon_url: str = field(default="", compare=False)
    latest_version: Optional[str] = field(default=None, compare=False)
    platform: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        # App Store ids arrive as numbers or strings depending on the endpoint
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "display_name", self.display_name or "")
        object.__setattr__(self, "icon_url", self.icon_url or "")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "LicenseApp":
        return cls(
            id=data["app_store_id"],
            display_name=data.get("name") or "",
            icon_url=data.get("icon_url") or "",
            latest_version=data.get("latest_version"),
            platform=data.get("platform"),
        )


LicenseCatalog = tuple[LicenseApp, ...]


@dataclass(frozen=True)
class Observation:
    """Combined projection of the two dependent reads.

    ``catalog`` is only set for READY. ``error`` keeps the failure that led
    to NOT_CONFIGURED/ERRORED for logging; it is never shown to the user.
    """

    kind: ObservationKind
    catalog: Optional[LicenseCatalog] = None
    error: Optional[Exception] = None

    @classmethod
    def loading(cls) -> "Observation":
        return cls(kind=ObservationKind.LOADING)

    @classmethod
    def not_configured(cls, error: Optional[Exception] = None) -> "Observation":
        return cls(kind=ObservationKind.NOT_CONFIGURED, error=error)

    @classmethod
    def errored(cls, error: Optional[Exception] = None) -> "Observation":
        return cls(kind=ObservationKind.ERRORED, error=error)

    @classmethod
    def ready(cls, catalog) -> "Observation":
        return cls(kind=ObservationKind.READY, catalog=tuple(catalog))

    @property
    def is_loading(self) -> bool:
        return self.kind == ObservationKind.LOADING

    @property
    def is_ready(self) -> bool:
        return self.kind == ObservationKind.READY

    def find(self, app_id: str) -> Optional[LicenseApp]:
        """Look up a catalog entry by App Store id."""
        for app in self.catalog or ():
            if app.id == str(app_id):
                return app
        return None


@dataclass(frozen=True)
class SelectionState:
    """Which license is chosen. ``submit_enabled`` is derived from it."""

    selected: Optional[LicenseApp] = None

    @property
    def submit_enabled(self) -> bool:
        return self.selected is not None


@dataclass(frozen=True)
class SubmissionOutcome:
    """What happened to one submission. Consumed once, never stored."""

    kind: OutcomeKind
    app_name: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, app_name: str) -> "SubmissionOutcome":
        return cls(kind=OutcomeKind.SUCCESS, app_name=app_name)

    @classmethod
    def duplicate(cls, reason: str, error: Optional[Exception] = None) -> "SubmissionOutcome":
        return cls(kind=OutcomeKind.DUPLICATE_ASSIGNMENT, reason=reason, error=error)

    @classmethod
    def generic_failure(cls, error: Optional[Exception] = None) -> "SubmissionOutcome":
        return cls(kind=OutcomeKind.GENERIC_FAILURE, error=error)

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS


@dataclass(frozen=True)
class Notification:
    """A flash message shown to the administrator."""

    level: FlashLevel
    message: str
