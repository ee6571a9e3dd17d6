"""Infrastructure adapters for App Store license assignment.

These adapters implement the port interfaces defined in the domain layer,
connecting the application to the backend API and to the notification
and navigation channels of the caller.
"""

from .fleet_vpp_repo import FleetVppRepository
from .notifications import LoggingNotifier, RecordingNavigator, RecordingNotifier

__all__ = [
    "FleetVppRepository",
    "RecordingNotifier",
    "LoggingNotifier",
    "RecordingNavigator",
]
