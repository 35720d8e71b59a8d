# ============================================================================
# API DEPENDENCIES
# ============================================================================
# STATUS: Core - Request guards
# PURPOSE: API key authentication and per-client rate limiting
# CREATED: 17 OCT 2026
# ============================================================================
"""
API Dependencies

FastAPI dependencies applied to routers:

- require_api_key: X-API-Key header must equal API_KEY. With API_KEY
  unset every protected route is refused.
- rate_limit: per-client-IP token bucket. Each client may spend
  RATE_LIMIT_MAX_REQUESTS requests, refilled evenly over
  RATE_LIMIT_WINDOW_SECONDS.
"""

import logging
import secrets
import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Header, HTTPException, Request

from core.config import get_config

logger = logging.getLogger(__name__)

FORBIDDEN_DETAIL = "Forbidden: Invalid API Key"
RATE_LIMITED_DETAIL = "Too many requests, please try again later."


# ============================================================================
# AUTHENTICATION
# ============================================================================

async def require_api_key(
    x_api_key: Optional[str] = Header(default=None, alias="X-API-Key"),
) -> str:
    """Reject the request with 403 unless X-API-Key matches API_KEY."""
    expected = get_config().api.api_key

    if not expected:
        logger.warning("API_KEY is not configured; refusing authenticated request")
        raise HTTPException(status_code=403, detail=FORBIDDEN_DETAIL)

    if not x_api_key or not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(status_code=403, detail=FORBIDDEN_DETAIL)

    return x_api_key


# ============================================================================
# RATE LIMITING
# ============================================================================

class TokenBucketLimiter:
    """
    In-memory token bucket keyed by client address.

    A bucket that has refilled to capacity is indistinguishable from a new
    one, so full buckets are dropped. The sweep runs at most once per
    refill period.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.capacity = float(max_requests)
        self.refill_per_second = max_requests / window_seconds if window_seconds > 0 else float("inf")
        self._clock = clock
        self._buckets: Dict[str, Tuple[float, float]] = {}
        self._refill_period = window_seconds if window_seconds > 0 else 0.0
        self._last_sweep = clock()

    def allow(self, key: str) -> bool:
        """Spend one token for ``key``; False when the bucket is empty."""
        now = self._clock()
        if now - self._last_sweep >= self._refill_period:
            self._sweep(now)

        tokens, last = self._buckets.get(key, (self.capacity, now))

        tokens = min(self.capacity, tokens + (now - last) * self.refill_per_second)
        if tokens < 1:
            self._buckets[key] = (tokens, now)
            return False

        self._buckets[key] = (tokens - 1, now)
        return True

    def _sweep(self, now: float) -> None:
        full = [
            key for key, (tokens, last) in self._buckets.items()
            if tokens + (now - last) * self.refill_per_second >= self.capacity
        ]
        for key in full:
            del self._buckets[key]
        self._last_sweep = now

    @property
    def tracked(self) -> int:
        """Number of clients with a partially spent bucket."""
        return len(self._buckets)

    def reset(self) -> None:
        self._buckets.clear()


_limiter: Optional[TokenBucketLimiter] = None


def get_rate_limiter() -> TokenBucketLimiter:
    """Get the process-wide limiter, built from config on first use."""
    global _limiter
    if _limiter is None:
        api = get_config().api
        _limiter = TokenBucketLimiter(api.rate_limit_max_requests, api.rate_limit_window_seconds)
    return _limiter


def reset_rate_limiter() -> None:
    """Drop the limiter and its buckets (for testing)."""
    global _limiter
    _limiter = None


def rate_limit(request: Request) -> None:
    """Raise 429 when the calling client has exhausted its budget."""
    ip = request.client.host if request.client else "unknown"
    if not get_rate_limiter().allow(ip):
        logger.warning(f"Rate limit exceeded for {ip}")
        raise HTTPException(status_code=429, detail=RATE_LIMITED_DETAIL)


__all__ = [
    "require_api_key",
    "rate_limit",
    "TokenBucketLimiter",
    "get_rate_limiter",
    "reset_rate_limiter",
    "FORBIDDEN_DETAIL",
    "RATE_LIMITED_DETAIL",
]
