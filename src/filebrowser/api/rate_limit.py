"""Fixed-window request rate limiter keyed by client address.

The first request from a client opens a window of ``window`` seconds; up to
``max_requests`` requests are admitted inside it. When the window expires the
count starts again at one.
"""

from __future__ import annotations

import math
import threading
import time

__all__ = ["RateLimiter", "RateLimitInfo", "RateRecord"]


class RateRecord:
    """Request count of one client within its current window."""

    __slots__ = ("count", "reset_time")

    def __init__(self, count: int, reset_time: float):
        self.count = count
        self.reset_time = reset_time


class RateLimitInfo:
    """Rate limit state returned by ``check()``."""

    __slots__ = ("allowed", "limit", "remaining", "reset_after")

    def __init__(self, allowed: bool, limit: int, remaining: int, reset_after: float):
        self.allowed = allowed
        self.limit = limit
        self.remaining = remaining
        self.reset_after = reset_after

    def headers(self) -> dict[str, str]:
        """Return rate-limit response headers (RFC 6585 style)."""
        h: dict[str, str] = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(math.ceil(self.reset_after)),
        }
        if not self.allowed:
            h["Retry-After"] = str(math.ceil(self.reset_after))
        return h


class RateLimiter:
    """Fixed-window rate limiter.

    Parameters
    ----------
    max_requests : int
        Requests admitted per client within one window.
    window : float
        Window length in seconds.
    clock : callable, optional
        Monotonic time source, replaceable in tests.
    """

    def __init__(self, max_requests: int, window: float, clock=time.monotonic):
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._records: dict[str, RateRecord] = {}
        self._lock = threading.Lock()
        self._last_cleanup = clock()

    def allow(self, key: str) -> bool:
        """Return True if the request is allowed, counting it."""
        return self.check(key).allowed

    def check(self, key: str) -> RateLimitInfo:
        """Count a request and return detailed info with header values."""
        now = self._clock()

        with self._lock:
            if now - self._last_cleanup > self.window:
                self._cleanup_locked(now)

            record = self._records.get(key)
            if record is None or now > record.reset_time:
                record = RateRecord(1, now + self.window)
                self._records[key] = record
            else:
                record.count += 1

            reset_after = max(record.reset_time - now, 0.0)
            allowed = record.count <= self.max_requests
            remaining = max(self.max_requests - record.count, 0)

        return RateLimitInfo(allowed, self.max_requests, remaining, reset_after)

    def _cleanup_locked(self, now: float) -> int:
        stale = [k for k, r in self._records.items() if now > r.reset_time]
        for k in stale:
            del self._records[k]
        self._last_cleanup = now
        return len(stale)

    def cleanup(self) -> int:
        """Remove records whose window has expired. Returns count removed."""
        with self._lock:
            return self._cleanup_locked(self._clock())

    def stats(self) -> dict:
        """Return the number of tracked clients and their current counts."""
        with self._lock:
            return {
                "total_clients": len(self._records),
                "clients": [
                    {"client": k, "count": r.count, "reset_after": max(r.reset_time - self._clock(), 0.0)}
                    for k, r in self._records.items()
                ],
            }
