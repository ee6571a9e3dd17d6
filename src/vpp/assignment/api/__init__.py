"""API layer for App Store license assignment.

Provides FastAPI router and schemas for the license view and assignment.
"""

from .router import router
from .schemas import AssignRequest, AssignResponse, LicenseAppDTO, NotificationDTO, VppViewResponse

__all__ = [
    "router",
    "AssignRequest",
    "AssignResponse",
    "LicenseAppDTO",
    "NotificationDTO",
    "VppViewResponse",
]
