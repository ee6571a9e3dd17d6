#!/usr/bin/env python3
"""Retry policy for backend reads.

This module provides the read-side resilience used by the query layer:
    - RetryPolicy: a pure decision of whether a failed read is retried
    - retry_with_policy: run an async read, retrying with exponential
      backoff for as long as the policy allows

Writes never go through here. Adding an app to a team is not idempotent
from the user's point of view and is attempted exactly once.

Example:
    policy = RetryPolicy(max_retries=3)
    info = await retry_with_policy(api.get_vpp_info, policy=policy)
"""
import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .exceptions import RateLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Status the backend uses for a structurally absent resource (e.g. no VPP token)
NOT_FOUND_STATUS = 404


@dataclass(frozen=True)
class RetryPolicy:
    """Decide whether a failed read should be retried.

    ``attempt_number`` is the number of failures seen so far for this read
    (1 after the first failure), so the default allows three retries after
    the initial attempt.

    Attributes:
        max_retries: Highest attempt number that is still retried
        is_permanent: Optional predicate marking further failures as never
            retryable (e.g. a classified "not configured" error)
    """

    max_retries: int = 3
    is_permanent: Optional[Callable[[Any], bool]] = None

    def should_retry(self, attempt_number: int, failure: Any) -> bool:
        """Return True if the read should be issued again.

        A 404 is never retried: retrying cannot make a missing
        configuration appear.
        """
        if getattr(failure, "status_code", None) == NOT_FOUND_STATUS:
            return False
        if self.is_permanent is not None and self.is_permanent(failure):
            return False
        return attempt_number <= self.max_retries


DEFAULT_RETRY_POLICY = RetryPolicy()


def backoff_delay(
    attempt_number: int,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    max_delay: float = 30.0,
) -> float:
    """Delay before retry ``attempt_number`` (1s, 2s, 4s, ... capped)."""
    return min(initial_delay * (backoff_factor ** (attempt_number - 1)), max_delay)


async def retry_with_policy(
    func: Callable[..., Awaitable[T]],
    *args,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    max_delay: float = 30.0,
    jitter: bool = False,
    on_retry: Optional[Callable[[Exception, int], None]] = None,
    **kwargs,
) -> T:
    """Call an async read, retrying while ``policy`` allows it.

    Args:
        func: Async function to call
        *args: Arguments to pass to func
        policy: RetryPolicy consulted after each failure
        initial_delay: Delay in seconds before the first retry
        backoff_factor: Delay multiplier between retries
        max_delay: Upper bound on any single delay
        jitter: Randomize each delay between 50% and 150%
        on_retry: Optional callback called before each retry with (exception, attempt)
        **kwargs: Keyword arguments to pass to func

    Returns:
        Result from func

    Raises:
        The last exception raised by func once the policy gives up.
    """
    attempt = 0
    while True:
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            attempt += 1
            if not policy.should_retry(attempt, e):
                if attempt > 1:
                    logger.error(f"Read failed after {attempt} attempts. Last error: {e}")
                raise

            delay = backoff_delay(attempt, initial_delay, backoff_factor, max_delay)
            if isinstance(e, RateLimitError) and e.retry_after:
                delay = min(float(e.retry_after), max_delay)
            if jitter:
                delay = delay * (0.5 + random.random())

            if on_retry:
                on_retry(e, attempt)

            logger.warning(
                f"Attempt {attempt} failed: {e}. Retrying in {delay:.1f}s"
            )
            await asyncio.sleep(delay)


__all__ = [
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "NOT_FOUND_STATUS",
    "backoff_delay",
    "retry_with_policy",
]
