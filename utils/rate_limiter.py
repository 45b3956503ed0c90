"""Fixed-window request counter keyed by client address."""

from __future__ import annotations

import ipaddress
import time
from dataclasses import dataclass
from typing import Callable

from flask import Request

DEFAULT_WINDOW_SECONDS = 60
DEFAULT_MAX_REQUESTS = 8


@dataclass
class _Bucket:
    count: int
    reset_at: float


class RateLimiter:
    """Per-process submission throttle.

    Counts live in memory and are lost on restart; separate worker processes
    each keep their own counts. A shared counter store can replace this class
    as long as it keeps the ``allow`` contract.

    Expired buckets are swept at most once per window, so the map only holds
    keys seen during roughly the last two windows.
    """

    def __init__(
        self,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._buckets: dict[str, _Bucket] = {}
        self._next_sweep_at = clock() + window_seconds

    def __len__(self) -> int:
        return len(self._buckets)

    def _sweep(self, now: float) -> None:
        expired = [key for key, bucket in self._buckets.items() if now >= bucket.reset_at]
        for key in expired:
            del self._buckets[key]
        self._next_sweep_at = now + self.window_seconds

    def allow(self, client_key: str | None) -> bool:
        """Record a hit for ``client_key`` and return whether it is allowed."""

        if not client_key:
            return True

        now = self._clock()
        if now >= self._next_sweep_at:
            self._sweep(now)

        bucket = self._buckets.get(client_key)
        if bucket is None or now >= bucket.reset_at:
            self._buckets[client_key] = _Bucket(count=1, reset_at=now + self.window_seconds)
            return True

        if bucket.count < self.max_requests:
            bucket.count += 1
            return True

        return False

    def reset(self) -> None:
        self._buckets.clear()


def client_key_from_request(req: Request) -> str | None:
    """Return the originating client IP, or None when it cannot be parsed."""

    forwarded = req.headers.get("X-Forwarded-For", "")
    candidate = forwarded.split(",")[0].strip() if forwarded else ""
    if not candidate:
        candidate = (req.remote_addr or "").strip()
    if not candidate:
        return None

    try:
        return str(ipaddress.ip_address(candidate))
    except ValueError:
        return None
