"""Classification of backend failures.

Every mapping from a raw failure onto an ErrorCategory lives here. The
backend does not yet return stable error codes for these cases, so the
structured ``code`` attribute is consulted first and the message sentinels
below act as the fallback.

Classification never raises: unknown objects, missing messages and
non-string reasons all fall through to GENERIC.
"""

import logging
from typing import Any, Optional

from .entities import ErrorCategory

logger = logging.getLogger(__name__)

# Reason text the backend uses when no VPP token has been uploaded
NOT_CONFIGURED_SENTINEL = "MDMConfigAsset was not found"

# Lowercased fragment of "... already has ... / already assigned ..." reasons
DUPLICATE_SENTINEL = "already"

NOT_CONFIGURED_CODES = frozenset({"NOT_CONFIGURED", "VPP_NOT_CONFIGURED"})
DUPLICATE_CODES = frozenset({"DUPLICATE_ASSIGNMENT", "ALREADY_EXISTS"})


def get_error_reason(failure: Any) -> str:
    """Best human-readable reason for a failure, or "" if there is none.

    Prefers the backend reason carried by APIError, then the exception's
    ``message`` attribute, then ``str(failure)``.
    """
    if failure is None:
        return ""

    for attr in ("reason", "message"):
        try:
            value = getattr(failure, attr, None)
        except Exception:
            value = None
        if isinstance(value, str) and value:
            return value

    if isinstance(failure, str):
        return failure

    try:
        return str(failure)
    except Exception:
        return ""


def _error_code(failure: Any) -> Optional[str]:
    try:
        code = getattr(failure, "code", None)
    except Exception:
        return None
    return code.upper() if isinstance(code, str) else None


def classify(failure: Any) -> ErrorCategory:
    """Classify a read failure as NOT_CONFIGURED or GENERIC."""
    if _error_code(failure) in NOT_CONFIGURED_CODES:
        return ErrorCategory.NOT_CONFIGURED
    if NOT_CONFIGURED_SENTINEL in get_error_reason(failure):
        return ErrorCategory.NOT_CONFIGURED
    return ErrorCategory.GENERIC


def is_not_configured(failure: Any) -> bool:
    return classify(failure) == ErrorCategory.NOT_CONFIGURED


def classify_submission(failure: Any) -> tuple[ErrorCategory, str]:
    """Classify a write failure.

    Returns:
        ``(DUPLICATE_ASSIGNMENT, reason)`` when the app is already on the
        team, ``(GENERIC, reason)`` otherwise. ``reason`` is the raw backend
        text; only the duplicate case shows it to the user.
    """
    reason = get_error_reason(failure)
    if _error_code(failure) in DUPLICATE_CODES:
        return ErrorCategory.DUPLICATE_ASSIGNMENT, reason
    if DUPLICATE_SENTINEL in reason.lower():
        return ErrorCategory.DUPLICATE_ASSIGNMENT, reason
    return ErrorCategory.GENERIC, reason
