"""
Generation tokens for discarding stale responses.

Network calls run on worker threads and may finish out of order. Each call
takes a token from begin(); when the response arrives it is only applied if
is_current() still holds, so the most recent request for a channel wins.
"""

import threading
from collections import defaultdict


class LatestRequestTracker:
    """Issues increasing tokens per channel ("search", "products", ...)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._latest = defaultdict(int)

    def begin(self, channel: str) -> int:
        with self._lock:
            self._latest[channel] += 1
            return self._latest[channel]

    def is_current(self, channel: str, token: int) -> bool:
        with self._lock:
            return self._latest[channel] == token

    def invalidate(self, channel: str) -> None:
        """Make every outstanding token of a channel stale."""
        with self._lock:
            self._latest[channel] += 1
