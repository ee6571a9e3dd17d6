"""Use cases for App Store license assignment.

Each use case represents a single user action and orchestrates
domain logic without knowing about infrastructure details.
"""

from .observe_catalog import (
    CATALOG_QUERY_NAME,
    STATUS_QUERY_KEY,
    DependentQueryOrchestrator,
    catalog_query_key,
)
from .session import AppStoreVppSession, SessionResult, ViewState, VppView, build_view
from .submit_assignment import GENERIC_FAILURE_MESSAGE, SubmissionController, success_message

__all__ = [
    "DependentQueryOrchestrator",
    "STATUS_QUERY_KEY",
    "CATALOG_QUERY_NAME",
    "catalog_query_key",
    "SubmissionController",
    "GENERIC_FAILURE_MESSAGE",
    "success_message",
    "AppStoreVppSession",
    "SessionResult",
    "ViewState",
    "VppView",
    "build_view",
]
