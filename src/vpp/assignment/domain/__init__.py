"""Domain layer for App Store license assignment.

Contains:
- Entities: Core business objects
- Ports: Interface definitions for infrastructure adapters
- Pure logic: error classification, observation combining, selection
"""

from .entities import (
    ErrorCategory,
    FlashLevel,
    LicenseApp,
    LicenseCatalog,
    Notification,
    Observation,
    ObservationKind,
    OutcomeKind,
    SelectionState,
    SubmissionOutcome,
    VppInfo,
)
from .errors import classify, classify_submission, get_error_reason, is_not_configured
from .observation import combine_observation
from .ports import INavigator, INotifier, IVppRepository
from .selection import SelectionStateMachine

__all__ = [
    # Entities
    "ErrorCategory",
    "FlashLevel",
    "LicenseApp",
    "LicenseCatalog",
    "Notification",
    "Observation",
    "ObservationKind",
    "OutcomeKind",
    "SelectionState",
    "SubmissionOutcome",
    "VppInfo",
    # Logic
    "classify",
    "classify_submission",
    "get_error_reason",
    "is_not_configured",
    "combine_observation",
    "SelectionStateMachine",
    # Ports
    "IVppRepository",
    "INotifier",
    "INavigator",
]
