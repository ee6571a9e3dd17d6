"""Backend API modules.

This package provides the HTTP client and the read-side plumbing used by
the App Store (VPP) license workflow.

Classes:
    FleetClient: Async HTTP client with typed errors
    MDMAppleAPI: VPP info, App Store app listing and assignment endpoints
    QueryCache: Keyed read cache with a freshness window
    QueryResult: Outcome of a keyed read
    RetryPolicy: Pure retry decision for failed reads

Exceptions:
    VPPError: Base exception for all VPP errors
    ConfigurationError: Missing or invalid configuration
    AuthenticationError: API token rejected
    APIError: API request failures
    NotFoundError: Resource absent (HTTP 404)
    ValidationError: Request refused (HTTP 400/409/422)
    RateLimitError: Rate limit exceeded
    ServerError: Backend failure (HTTP 5xx)
    NetworkError: Network connectivity issues
    SessionError: Assignment session misuse
"""
from .client import FleetClient, extract_error_reason
from .exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
    SessionClosedError,
    SessionError,
    SubmissionInProgressError,
    TimeoutError,
    ValidationError,
    VPPError,
)
from .mdm_apple import MDMAppleAPI
from .query_cache import QueryCache, QueryResult, QueryStatus
from .resilience import DEFAULT_RETRY_POLICY, RetryPolicy, retry_with_policy
from .urls import build_query_string, software_titles_url

__all__ = [
    # Client
    "FleetClient",
    "MDMAppleAPI",
    "extract_error_reason",
    # Queries
    "QueryCache",
    "QueryResult",
    "QueryStatus",
    # Resilience
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "retry_with_policy",
    # URLs
    "build_query_string",
    "software_titles_url",
    # Exceptions
    "VPPError",
    "ConfigurationError",
    "AuthenticationError",
    "APIError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "ServerError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "SessionError",
    "SessionClosedError",
    "SubmissionInProgressError",
]
