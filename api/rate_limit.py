"""
Fixed-window rate limiter keyed by client address.

Each client may make max_requests requests per window; the window restarts
on the first request after it elapses. State is in-memory and per-process.
"""

import threading
import time
from typing import Callable, Dict, Tuple


class RateLimiter:
    """Per-client fixed-window request counter."""

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        # client -> (request count, window start)
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._last_prune = clock()
        self._lock = threading.Lock()

    def hit(self, client: str) -> bool:
        """
        Record a request from client.

        Returns:
            True if the request is within the limit, False if it must be rejected
        """
        now = self._clock()
        with self._lock:
            if now - self._last_prune > self.window_seconds:
                self._prune_locked(now)
            count, start = self._windows.get(client, (0, now))
            if now - start > self.window_seconds:
                count, start = 0, now
            count += 1
            self._windows[client] = (count, start)
        return count <= self.max_requests

    def _prune_locked(self, now: float) -> None:
        """Drop windows that have elapsed."""
        expired = [client for client, (_, start) in self._windows.items() if now - start > self.window_seconds]
        for client in expired:
            del self._windows[client]
        self._last_prune = now

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
