#!/usr/bin/env python3
"""Keyed query cache with a freshness window.

Reads are issued through ``QueryCache.fetch`` under a composite key such as
``("vppSoftware", team_id)``. The cache:

    - reuses a successful result while it is younger than ``stale_time``
    - shares one in-flight request between concurrent callers of a key
    - retries failed reads according to a RetryPolicy
    - turns every outcome into a QueryResult instead of raising
    - evicts results older than ``gc_time`` seconds

Failed results are remembered so the current state can be projected, but
they are never considered fresh: the next fetch of that key goes to the
network again.

Example:
    cache = QueryCache(stale_time=30)
    result = await cache.fetch(("vppInfo",), api.get_vpp_info)
    if result.is_success:
        print(result.data)
"""
import asyncio
import logging
import os
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Hashable, Optional, TypeVar

from .resilience import DEFAULT_RETRY_POLICY, RetryPolicy, retry_with_policy

logger = logging.getLogger(__name__)

T = TypeVar("T")

QueryKey = tuple[Hashable, ...]

DEFAULT_STALE_SECONDS = 30.0
# Results are dropped after 5 minutes whether or not they were reused
DEFAULT_GC_SECONDS = 300.0


class QueryStatus(str, Enum):
    """Lifecycle of a single keyed read."""

    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Outcome of a keyed read: either data or the failure that ended it."""

    status: QueryStatus
    data: Optional[T] = None
    error: Optional[Exception] = None
    updated_at: float = 0.0

    @classmethod
    def pending(cls) -> "QueryResult[T]":
        return cls(status=QueryStatus.PENDING)

    @classmethod
    def success(cls, data: T, updated_at: float = 0.0) -> "QueryResult[T]":
        return cls(status=QueryStatus.SUCCESS, data=data, updated_at=updated_at)

    @classmethod
    def failure(cls, error: Exception, updated_at: float = 0.0) -> "QueryResult[T]":
        return cls(status=QueryStatus.ERROR, error=error, updated_at=updated_at)

    @property
    def is_pending(self) -> bool:
        return self.status == QueryStatus.PENDING

    @property
    def is_success(self) -> bool:
        return self.status == QueryStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR


def _stale_time_from_env() -> float:
    raw = os.getenv("VPP_QUERY_STALE_SECONDS")
    if not raw:
        return DEFAULT_STALE_SECONDS
    try:
        return float(raw)
    except ValueError:
        logger.warning(
            f"Invalid VPP_QUERY_STALE_SECONDS={raw!r}, using {DEFAULT_STALE_SECONDS}s"
        )
        return DEFAULT_STALE_SECONDS


class QueryCache:
    """In-memory results of keyed reads.

    Each read runs in a task owned by the cache. Callers only wait on it,
    so a caller that is cancelled neither aborts the read nor affects the
    other callers of the same key.

    Results older than ``gc_time`` are dropped, so keys of teams nobody
    looks at any more do not accumulate.

    Attributes:
        stale_time: Seconds a successful result stays fresh
        gc_time: Seconds after which a result is evicted (at least stale_time)
        retry_policy: Default RetryPolicy for reads without their own
        retry_delay: Initial backoff before the first retry
        max_retry_delay: Cap on a single backoff delay
    """

    def __init__(
        self,
        stale_time: Optional[float] = None,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        retry_delay: float = 1.0,
        max_retry_delay: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
        gc_time: float = DEFAULT_GC_SECONDS,
    ):
        self.stale_time = _stale_time_from_env() if stale_time is None else stale_time
        self.gc_time = max(gc_time, self.stale_time)
        self.retry_policy = retry_policy
        self.retry_delay = retry_delay
        self.max_retry_delay = max_retry_delay
        self._clock = clock
        self._entries: dict[QueryKey, QueryResult[Any]] = {}
        self._inflight: dict[QueryKey, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def is_fresh(self, key: QueryKey) -> bool:
        """True if ``key`` holds a success younger than ``stale_time``."""
        entry = self._entries.get(key)
        if entry is None or not entry.is_success:
            return False
        return (self._clock() - entry.updated_at) < self.stale_time

    def is_fetching(self, key: QueryKey) -> bool:
        return key in self._inflight

    def peek(self, key: QueryKey) -> Optional[QueryResult[Any]]:
        """Current state of ``key`` without issuing a read.

        A previous success is still shown while a refetch is in flight.
        Returns None if the key was never requested or has been evicted.
        """
        entry = self._entries.get(key)
        if entry is not None and entry.is_success:
            return entry
        if key in self._inflight:
            return QueryResult.pending()
        return entry

    async def fetch(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[T]],
        retry_policy: Optional[RetryPolicy] = None,
    ) -> QueryResult[T]:
        """Return the result for ``key``, reading only when needed.

        Args:
            key: Composite cache key
            fetcher: Zero-argument coroutine function performing the read
            retry_policy: Overrides the cache's default policy for this read

        Returns:
            QueryResult with either data or the final failure
        """
        self.evict_expired()

        if self.is_fresh(key):
            logger.debug(f"Query {key!r} is fresh, reusing cached result")
            return self._entries[key]

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._read(key, fetcher, retry_policy or self.retry_policy))
            self._inflight[key] = task
        else:
            logger.debug(f"Query {key!r} already in flight, awaiting shared result")

        return await asyncio.shield(task)

    async def _read(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[T]],
        retry_policy: RetryPolicy,
    ) -> QueryResult[T]:
        try:
            data = await retry_with_policy(
                fetcher,
                policy=retry_policy,
                initial_delay=self.retry_delay,
                max_delay=self.max_retry_delay,
            )
            result: QueryResult[T] = QueryResult.success(data, updated_at=self._clock())
        except Exception as e:
            logger.warning(f"Query {key!r} failed: {e}")
            result = QueryResult.failure(e, updated_at=self._clock())
        finally:
            self._inflight.pop(key, None)

        self._entries[key] = result
        return result

    def evict_expired(self) -> int:
        """Drop results older than ``gc_time``. Returns how many were dropped."""
        now = self._clock()
        expired = [
            key
            for key, entry in self._entries.items()
            if now - entry.updated_at >= self.gc_time and key not in self._inflight
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired queries")
        return len(expired)

    def invalidate(self, key: Optional[QueryKey] = None) -> None:
        """Forget the result of ``key`` (or of every key)."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)
            self.evict_expired()
