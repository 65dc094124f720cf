"""In-memory rate limiting for the admin login endpoint.

Sliding window per client IP: 5 login attempts per 15 minutes. Disabled
when ``TESTING`` is set so the suite can log in freely.
"""

import logging
import os
import time
from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock

from fastapi import HTTPException, Request, status

logger = logging.getLogger("mahjong_ledger.middleware.rate_limit")


def _is_rate_limiting_disabled() -> bool:
    return os.getenv("TESTING", "").lower() in ("1", "true", "yes")


@dataclass
class RateLimitConfig:
    """One rate limit rule."""
    max_requests: int
    window_seconds: int
    key_prefix: str


RATE_LIMITS = {
    "admin_login": RateLimitConfig(
        max_requests=5,
        window_seconds=15 * 60,
        key_prefix="admin_login",
    ),
}


@dataclass
class RateLimitEntry:
    timestamps: list[float] = field(default_factory=list)


class InMemoryRateLimiter:
    """Thread-safe sliding-window limiter keyed by rule and client IP."""

    def __init__(self, cleanup_interval: int = 300) -> None:
        self._buckets: dict[str, RateLimitEntry] = defaultdict(RateLimitEntry)
        self._lock = Lock()
        self._last_cleanup = time.time()
        self._cleanup_interval = cleanup_interval

    @staticmethod
    def client_ip(request: Request) -> str:
        """Client IP, honouring proxy headers."""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip
        if request.client:
            return request.client.host
        return "unknown"

    def _cleanup(self, now: float) -> None:
        if now - self._last_cleanup < self._cleanup_interval:
            return
        cutoff = now - max(cfg.window_seconds for cfg in RATE_LIMITS.values())
        stale = []
        for key, entry in self._buckets.items():
            entry.timestamps = [ts for ts in entry.timestamps if ts > cutoff]
            if not entry.timestamps:
                stale.append(key)
        for key in stale:
            del self._buckets[key]
        self._last_cleanup = now

    def hit(self, key: str, limit_name: str, now: float | None = None) -> tuple[bool, int]:
        """Record one attempt for ``key``.

        Returns:
            Tuple of (is_limited, retry_after_seconds).
        """
        config = RATE_LIMITS[limit_name]
        now = time.time() if now is None else now
        bucket_key = f"{config.key_prefix}:{key}"

        with self._lock:
            self._cleanup(now)
            entry = self._buckets[bucket_key]
            window_start = now - config.window_seconds
            entry.timestamps = [ts for ts in entry.timestamps if ts > window_start]

            if len(entry.timestamps) >= config.max_requests:
                retry_after = int(min(entry.timestamps) + config.window_seconds - now) + 1
                return True, retry_after

            entry.timestamps.append(now)
            return False, 0

    def check_rate_limit(self, request: Request, limit_name: str) -> None:
        """Raise HTTPException 429 when the caller is over the limit."""
        if _is_rate_limiting_disabled():
            return

        client_ip = self.client_ip(request)
        is_limited, retry_after = self.hit(client_ip, limit_name)
        if is_limited:
            logger.warning(
                "Rate limit exceeded: %s from %s (retry after %ds)",
                limit_name, client_ip, retry_after,
            )
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail={
                    "error": "RATE_LIMIT_EXCEEDED",
                    "message": "Too many requests. Please try again later.",
                    "retry_after": retry_after,
                },
                headers={"Retry-After": str(retry_after)},
            )

    def reset(self) -> None:
        """Reset all buckets. Used for testing."""
        with self._lock:
            self._buckets.clear()


rate_limiter = InMemoryRateLimiter()
