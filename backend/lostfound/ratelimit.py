from __future__ import annotations

import time
from functools import wraps
from threading import Lock
from typing import Callable, Dict, Tuple

from flask import current_app, request

from .errors import TooManyRequests


class RateLimiter:
    """Fixed-window request counter keyed by client.

    Simple in-memory state. Not suitable for multi-process deployments.
    """

    def __init__(self, limit: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._lock = Lock()

    def hit(self, key: str) -> bool:
        """Count one request for ``key``; False once the window's budget is spent."""
        now = self.clock()
        with self._lock:
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            count += 1
            self._windows[key] = (started, count)
            if len(self._windows) > 10000:
                self._drop_stale_locked(now)
        return count <= self.limit

    def _drop_stale_locked(self, now: float) -> None:
        for key in [k for k, (s, _) in self._windows.items() if now - s >= self.window_seconds]:
            del self._windows[key]


def client_key() -> str:
    # remote_addr already honours X-Forwarded-For through ProxyFix
    return request.remote_addr or "unknown"


def check_rate_limit() -> None:
    limiter: RateLimiter = current_app.extensions["rate_limiter"]
    key = client_key()
    if not limiter.hit(key):
        current_app.logger.warning("rate limit exceeded for %s on %s %s", key, request.method, request.path)
        raise TooManyRequests()


def rate_limited(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        check_rate_limit()
        return fn(*args, **kwargs)

    return wrapper
