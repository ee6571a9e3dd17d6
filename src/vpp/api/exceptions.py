#!/usr/bin/env python3
"""Exceptions raised by the backend client and the assignment session.

Every error carries a machine-readable ``code`` and a ``recoverable`` flag.
The assignment domain classifies failures by ``code`` first and by the
backend ``reason`` text second, so both are preserved as received.

Hierarchy:
    VPPError
    ├── ConfigurationError        missing FLEET_URL / FLEET_API_TOKEN
    ├── AuthenticationError       401/403
    ├── APIError                  any other non-2xx answer
    │   ├── NotFoundError         404 (e.g. no VPP token uploaded)
    │   ├── ValidationError       400/409/422 (e.g. app already on team)
    │   ├── RateLimitError        429
    │   └── ServerError           5xx
    ├── NetworkError
    │   ├── ConnectionError
    │   └── TimeoutError
    └── SessionError              misuse of an assignment session
        ├── SessionClosedError
        └── SubmissionInProgressError
"""
from datetime import datetime, timezone
from typing import Any, Optional

# Statuses worth another read attempt
RECOVERABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


# ============================================
# Base Exception
# ============================================

class VPPError(Exception):
    """Base exception for the VPP license workflow.

    Attributes:
        message: Human-readable description
        code: Machine-readable code (defaults to the class name, upper-cased)
        details: Extra context for logs
        cause: Exception this one wraps, if any
        recoverable: Whether repeating the operation may succeed
        timestamp: When the error was raised (UTC)
    """

    default_code: Optional[str] = None
    default_recoverable = False

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: Optional[bool] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code or type(self).__name__.upper()
        self.details = dict(details or {})
        self.cause = cause
        self.recoverable = self.default_recoverable if recoverable is None else recoverable
        self.timestamp = datetime.now(timezone.utc)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        text = f"[{self.code}] {self.message}"
        if self.details:
            text += " (" + ", ".join(f"{k}={v}" for k, v in self.details.items()) + ")"
        return text

    def to_dict(self) -> dict[str, Any]:
        """Serializable form for structured logging."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "cause": str(self.cause) if self.cause else None,
        }


# ============================================
# Configuration and Credentials
# ============================================

class ConfigurationError(VPPError):
    """Required settings are missing or invalid."""

    default_code = "CONFIGURATION_ERROR"

    def __init__(self, message: str, missing_keys: Optional[list[str]] = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if missing_keys:
            details["missing_keys"] = list(missing_keys)
        super().__init__(message, details=details, **kwargs)


class AuthenticationError(VPPError):
    """The backend rejected the API token (HTTP 401/403)."""

    default_code = "AUTHENTICATION_ERROR"

    def __init__(self, message: str = "API token rejected", **kwargs):
        super().__init__(message, **kwargs)


# ============================================
# API Errors
# ============================================

class APIError(VPPError):
    """Non-2xx answer from the backend.

    Attributes:
        status_code: HTTP status
        endpoint: Path that was called
        method: HTTP method
        response_body: Raw body (truncated to 500 chars in ``details``)
        reason: First ``errors[].reason`` or ``message`` of the body
    """

    default_status: Optional[int] = None

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        response_body: Optional[str] = None,
        method: str = "GET",
        reason: Optional[str] = None,
        **kwargs,
    ):
        status_code = status_code or self.default_status or 0
        details = kwargs.pop("details", None) or {}
        details["status_code"] = status_code
        if endpoint:
            details["endpoint"] = endpoint
        if method:
            details["method"] = method
        if response_body:
            details["response_body"] = response_body[:500]

        kwargs.setdefault("code", self.default_code or f"API_ERROR_{status_code}")
        kwargs.setdefault("recoverable", status_code in RECOVERABLE_STATUSES)
        super().__init__(message, details=details, **kwargs)

        self.status_code = status_code
        self.endpoint = endpoint
        self.method = method
        self.response_body = response_body
        self.reason = reason


class NotFoundError(APIError):
    """HTTP 404. For the VPP endpoint this means no token is configured."""

    default_code = "NOT_FOUND"
    default_status = 404

    def __init__(self, message: str = "Resource not found", **kwargs):
        kwargs.setdefault("recoverable", False)
        super().__init__(message, **kwargs)


class ValidationError(APIError):
    """The backend refused the request (HTTP 400/409/422)."""

    default_code = "VALIDATION_ERROR"
    default_status = 422

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", False)
        super().__init__(message, **kwargs)


class RateLimitError(APIError):
    """HTTP 429.

    Attributes:
        retry_after: Seconds from the Retry-After header, if sent
    """

    default_code = "RATE_LIMIT_EXCEEDED"
    default_status = 429

    def __init__(self, message: str = "Rate limit exceeded", retry_after: Optional[int] = None, **kwargs):
        if retry_after:
            kwargs.setdefault("details", {})["retry_after_seconds"] = retry_after
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(APIError):
    """HTTP 5xx."""

    default_code = "SERVER_ERROR"
    default_status = 500

    def __init__(self, message: str = "Server error", **kwargs):
        kwargs.setdefault("recoverable", True)
        super().__init__(message, **kwargs)


# ============================================
# Network Errors
# ============================================

class NetworkError(VPPError):
    """The request never produced an HTTP answer."""

    default_recoverable = True


class ConnectionError(NetworkError):
    default_code = "CONNECTION_ERROR"

    def __init__(self, message: str = "Failed to connect to server", host: Optional[str] = None, **kwargs):
        if host:
            kwargs.setdefault("details", {})["host"] = host
        super().__init__(message, **kwargs)


class TimeoutError(NetworkError):
    default_code = "TIMEOUT_ERROR"

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: Optional[float] = None,
        **kwargs,
    ):
        if timeout_seconds:
            kwargs.setdefault("details", {})["timeout_seconds"] = timeout_seconds
        super().__init__(message, **kwargs)


# ============================================
# Session Errors
# ============================================

class SessionError(VPPError):
    """An assignment session was used in a way its state does not allow."""


class SessionClosedError(SessionError):
    default_code = "SESSION_CLOSED"

    def __init__(self, message: str = "Assignment session has already exited", **kwargs):
        super().__init__(message, **kwargs)


class SubmissionInProgressError(SessionError):
    """A second submit arrived while the first write was still pending."""

    default_code = "SUBMISSION_IN_PROGRESS"

    def __init__(
        self,
        message: str = "A submission is already in progress",
        team_id: Optional[int] = None,
        **kwargs,
    ):
        if team_id is not None:
            kwargs.setdefault("details", {})["team_id"] = team_id
        super().__init__(message, **kwargs)


# ============================================
# Exports
# ============================================

__all__ = [
    "RECOVERABLE_STATUSES",
    # Base
    "VPPError",
    # Configuration
    "ConfigurationError",
    "AuthenticationError",
    # API
    "APIError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "ServerError",
    # Network
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    # Session
    "SessionError",
    "SessionClosedError",
    "SubmissionInProgressError",
]
