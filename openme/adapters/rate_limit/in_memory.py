"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: every serverless instance or worker keeps its own
  buckets, so the effective limit grows with the number of instances.
- Thread-safe: uses a lock around shared state.
- Expired buckets are swept at most once per window, so rotating client
  keys cannot grow the map without bound.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from openme.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class _Bucket:
    count: int
    reset_at: float


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Fixed-window counter per ``(scope, client key)``.

    A window opens on the first hit for a key and lasts ``window_seconds``.
    Hits inside the window count up to ``limit``; further hits are rejected
    until the window has elapsed, at which point the next hit opens a new one.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the limiter.

        Args:
            clock: Time source function returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._buckets: dict[str, _Bucket] = {}
        self._next_sweep_at = 0.0

    @staticmethod
    def _bucket_key(scope: str, client_key: str) -> str:
        return f"{scope}:{client_key}"

    def hit(
        self,
        scope: str,
        client_key: str,
        *,
        limit: int,
        window_seconds: float,
    ) -> RateLimitResult:
        """Count one request and report whether it may proceed.

        Raises:
            ValueError: If scope/key are empty or limit/window are invalid.
        """
        if not scope:
            raise ValueError("scope must be a non-empty string")
        if not client_key:
            raise ValueError("client_key must be a non-empty string")
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        now = self._clock()
        key = self._bucket_key(scope, client_key)

        with self._lock:
            if now > self._next_sweep_at:
                self._evict_expired(now)
                self._next_sweep_at = now + window_seconds

            bucket = self._buckets.get(key)

            if bucket is None or now > bucket.reset_at:
                bucket = _Bucket(count=1, reset_at=now + window_seconds)
                self._buckets[key] = bucket
                return RateLimitResult(
                    allowed=True,
                    limit=limit,
                    remaining=limit - 1,
                    reset_at=int(math.ceil(bucket.reset_at)),
                    retry_after_seconds=None,
                )

            if bucket.count >= limit:
                return RateLimitResult(
                    allowed=False,
                    limit=limit,
                    remaining=0,
                    reset_at=int(math.ceil(bucket.reset_at)),
                    retry_after_seconds=max(1, int(math.ceil(bucket.reset_at - now))),
                )

            bucket.count += 1
            return RateLimitResult(
                allowed=True,
                limit=limit,
                remaining=max(0, limit - bucket.count),
                reset_at=int(math.ceil(bucket.reset_at)),
                retry_after_seconds=None,
            )

    def _evict_expired(self, now: float) -> None:
        """Drop buckets whose window has elapsed. Caller holds the lock."""
        expired = [key for key, bucket in self._buckets.items() if now > bucket.reset_at]
        for key in expired:
            del self._buckets[key]

    def clear(self) -> None:
        with self._lock:
            self._buckets.clear()
            self._next_sweep_at = 0.0

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)
