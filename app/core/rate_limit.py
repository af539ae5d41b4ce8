"""
Per-caller rate limiting for the AI helper endpoints.

Sliding window kept in process memory: each caller id maps to the
timestamps of its recent requests. Good enough for a single worker;
several workers each keep their own window.
"""

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from fastapi import Depends, HTTPException

from app.core.auth import get_current_user
from app.core.config import get_settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """Allow at most `limit` hits per `window` seconds per key."""

    def __init__(self, limit: int, window: float, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window = window
        self._clock = clock
        self._hits: Dict[str, List[float]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> bool:
        """Record a request for `key`. Returns False when over the limit."""
        now = self._clock()
        with self._lock:
            self._prune(now)
            bucket = self._hits.get(key, [])
            if len(bucket) >= self.limit:
                return False
            bucket.append(now)
            self._hits[key] = bucket
            return True

    def _prune(self, now: float):
        """Drop expired timestamps, and callers left with none. Caller holds the lock."""
        for key in list(self._hits):
            bucket = [t for t in self._hits[key] if now - t < self.window]
            if bucket:
                self._hits[key] = bucket
            else:
                del self._hits[key]

    def __len__(self) -> int:
        """Number of callers with requests inside the current window."""
        with self._lock:
            self._prune(self._clock())
            return len(self._hits)


_ai_limiter: Optional[RateLimiter] = None


def get_ai_rate_limiter() -> RateLimiter:
    """Get or create the AI endpoint limiter (singleton pattern)"""
    global _ai_limiter
    if _ai_limiter is None:
        settings = get_settings()
        _ai_limiter = RateLimiter(
            limit=settings.ai_rate_limit_requests,
            window=settings.ai_rate_limit_window_seconds,
        )
    return _ai_limiter


async def ai_rate_limit(
    user: dict = Depends(get_current_user),
    limiter: RateLimiter = Depends(get_ai_rate_limiter),
) -> dict:
    """Dependency - authenticated caller, throttled. Returns the caller's claims."""
    if not limiter.hit(user["id"]):
        logger.info(f"AI rate limit hit for caller {user['id']}")
        raise HTTPException(
            status_code=429,
            detail="Too many AI requests, please try again later",
            headers={"Retry-After": str(int(limiter.window))},
        )
    return user
