"""Per-key fixed-window rate limiting.

Each key gets a bucket ``{count, reset_at}``. The first request after the
window has elapsed opens a fresh bucket. A fixed window lets up to
``2 * max_requests`` through across a window boundary; a sliding-window or
token-bucket limiter can replace it behind the same ``check(key) -> bool``.

Bucket state is process-local and guarded by a lock, so ``check`` is safe
from both event-loop tasks and worker threads.

Examples:
    >>> limiter = RateLimiter(max_requests=2, window_seconds=60)
    >>> limiter.check("u1"), limiter.check("u1"), limiter.check("u1")
    (True, True, False)

Tests:
    - tests/unit/test_core/test_rate_limiter.py
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Callable

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(slots=True)
class _Bucket:
    count: int
    reset_at: float


class RateLimiter:
    """Fixed-window counter keyed by caller.

    Attributes:
        max_requests: Requests allowed per window.
        window_seconds: Window length.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Clock | None = None,
    ) -> None:
        if max_requests < 0:
            raise ValueError("max_requests must be >= 0")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic
        self._buckets: dict[str, _Bucket] = {}
        self._lock = Lock()
        self._next_sweep = self._clock() + window_seconds

    def check(self, key: str) -> bool:
        """Record a request for ``key`` and report whether it is allowed.

        Expired buckets are swept at most once per window, so the map holds
        only keys seen within roughly the last two windows.
        """
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._drop_expired(now)
                self._next_sweep = now + self.window_seconds

            bucket = self._buckets.get(key)

            if bucket is None or now >= bucket.reset_at:
                self._buckets[key] = _Bucket(count=1, reset_at=now + self.window_seconds)
                return self.max_requests > 0

            if bucket.count >= self.max_requests:
                return False

            bucket.count += 1
            return True

    def _drop_expired(self, now: float) -> None:
        expired = [key for key, bucket in self._buckets.items() if now >= bucket.reset_at]
        for key in expired:
            del self._buckets[key]

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()

    @property
    def bucket_count(self) -> int:
        with self._lock:
            return len(self._buckets)


class RateLimitCategory(str, Enum):
    """Operation categories limited independently."""

    UPLOAD = "upload"
    READ = "read"
    DELETE = "delete"


class RateLimitPolicy:
    """One limiter per operation category sharing a window length.

    When disabled, every check passes and no limiter (and therefore no
    bucket state) is created.
    """

    def __init__(
        self,
        *,
        enabled: bool,
        window_seconds: float,
        upload_max: int,
        read_max: int,
        delete_max: int,
        clock: Clock | None = None,
    ) -> None:
        self.enabled = enabled
        self.window_seconds = window_seconds
        self._limiters: dict[RateLimitCategory, RateLimiter] = {}
        if enabled:
            maxima = {
                RateLimitCategory.UPLOAD: upload_max,
                RateLimitCategory.READ: read_max,
                RateLimitCategory.DELETE: delete_max,
            }
            self._limiters = {
                category: RateLimiter(limit, window_seconds, clock=clock)
                for category, limit in maxima.items()
            }

    def check(self, category: RateLimitCategory, key: str) -> bool:
        if not self.enabled:
            return True
        allowed = self._limiters[category].check(key)
        if not allowed:
            logger.warning(f"[RATE_LIMIT] {category.value} limit exceeded for key {key}")
        return allowed

    def limiter(self, category: RateLimitCategory) -> RateLimiter | None:
        return self._limiters.get(category)
