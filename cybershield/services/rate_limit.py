"""Per-client sliding-window rate limiting."""
from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, Request

from cybershield.config import Settings, get_settings
from cybershield.utils.errors import RateLimited

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Accept at most ``max_requests`` per key within any ``window_seconds`` span.

    Each key keeps the timestamps of its accepted requests; entries older than
    the window are evicted before the check, so a blocked client regains
    access exactly when its oldest accepted request leaves the window.
    """

    def __init__(
        self,
        name: str,
        *,
        window_seconds: float,
        max_requests: int,
        message: str,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1 or window_seconds <= 0:
            raise ValueError("Rate limiter needs a positive window and threshold")
        self.name = name
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.message = message
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def _evict(self, hits: deque[float], now: float) -> None:
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def hit(self, key: str) -> None:
        """Record a request for ``key`` or raise ``RateLimited``."""

        with self._lock:
            now = self._clock()
            hits = self._hits.setdefault(key, deque())
            self._evict(hits, now)
            if len(hits) >= self.max_requests:
                retry_after = max(1, math.ceil(hits[0] + self.window_seconds - now))
                logger.warning(
                    "Rate limit exceeded",
                    extra={"limiter": self.name, "client": key, "retry_after": retry_after},
                )
                raise RateLimited(self.message, retry_after=retry_after)
            hits.append(now)

    def prune(self) -> None:
        """Forget keys whose window is empty."""

        with self._lock:
            now = self._clock()
            for key in list(self._hits):
                hits = self._hits[key]
                self._evict(hits, now)
                if not hits:
                    del self._hits[key]


@dataclass
class RateLimits:
    """The independent limiters guarding the public API."""

    general: SlidingWindowRateLimiter
    auth: SlidingWindowRateLimiter
    contact: SlidingWindowRateLimiter
    audit: SlidingWindowRateLimiter
    enabled: bool = True

    def get(self, scope: str) -> SlidingWindowRateLimiter:
        return getattr(self, scope)

    def prune(self) -> None:
        for limiter in (self.general, self.auth, self.contact, self.audit):
            limiter.prune()


def build_rate_limits(
    settings: Settings | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> RateLimits:
    settings = settings or get_settings()
    return RateLimits(
        general=SlidingWindowRateLimiter(
            "general",
            window_seconds=15 * 60,
            max_requests=100,
            message="Too many requests, please try again later.",
            clock=clock,
        ),
        auth=SlidingWindowRateLimiter(
            "auth",
            window_seconds=15 * 60,
            max_requests=10,
            message="Too many authentication attempts. Please try again later.",
            clock=clock,
        ),
        contact=SlidingWindowRateLimiter(
            "contact",
            window_seconds=60 * 60,
            max_requests=5,
            message="Too many messages sent. Please try again in an hour.",
            clock=clock,
        ),
        audit=SlidingWindowRateLimiter(
            "audit",
            window_seconds=24 * 60 * 60,
            max_requests=3,
            message="Audit request limit reached. Please try again tomorrow.",
            clock=clock,
        ),
        enabled=settings.RATE_LIMIT_ENABLED,
    )


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def get_rate_limits(request: Request) -> RateLimits:
    return request.app.state.rate_limits


def rate_limit(scope: str) -> Callable:
    """Dependency factory enforcing the limiter named ``scope``."""

    def _dep(request: Request, limits: RateLimits = Depends(get_rate_limits)) -> None:
        if not limits.enabled:
            return
        limits.get(scope).hit(client_key(request))

    return _dep


__all__ = [
    "SlidingWindowRateLimiter",
    "RateLimits",
    "build_rate_limits",
    "client_key",
    "get_rate_limits",
    "rate_limit",
]
