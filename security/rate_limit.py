"""Sliding-window rate limiting for the login endpoint."""
import math
import threading
import time
from collections import defaultdict, deque
from flask import current_app

from utils.client_ip import client_ip


class SlidingWindowRateLimiter:
    """In-memory sliding-window limiter keyed by an explicit string."""

    def __init__(self, max_requests: int, window_seconds: float, clock=time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits = defaultdict(deque)
        self._lock = threading.Lock()

    def hit(self, key: str) -> tuple[bool, int]:
        """
        Returns (allowed, retry_after_seconds).
        Rejected hits are not recorded, so a caller that keeps hammering
        is admitted again as soon as the oldest admitted hit leaves the window.
        """
        with self._lock:
            now = self._clock()
            window_start = now - self.window_seconds
            self._drop_idle_keys(window_start)
            bucket = self._hits[key]

            while bucket and bucket[0] <= window_start:
                bucket.popleft()

            if len(bucket) >= self.max_requests:
                retry_after = bucket[0] + self.window_seconds - now
                return False, max(int(math.ceil(retry_after)), 1)

            bucket.append(now)
            return True, 0

    def _drop_idle_keys(self, window_start: float) -> None:
        # A key whose newest hit has left the window holds no state worth keeping
        idle = [key for key, bucket in self._hits.items() if not bucket or bucket[-1] <= window_start]
        for key in idle:
            del self._hits[key]

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        with self._lock:
            return len(self._hits)

    def reset(self, key: str = None) -> None:
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)


def build_login_rate_limiter(config) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(
        max_requests=config.get("LOGIN_RATE_MAX_REQUESTS", 5),
        window_seconds=config.get("LOGIN_RATE_WINDOW_SECONDS", 10),
    )


def login_rate_key(ip: str) -> str:
    # "global" throttles the endpoint as a whole, "ip" throttles each caller
    scope = current_app.config.get("LOGIN_RATE_SCOPE", "global")
    if scope == "ip":
        return f"login:{ip}"
    return "login"


def check_login_rate() -> tuple[bool, int]:
    limiter = current_app.extensions["login_rate_limiter"]
    return limiter.hit(login_rate_key(client_ip()))
