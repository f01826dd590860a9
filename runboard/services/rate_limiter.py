"""Moving-window admission control for the ingestion endpoint."""

from __future__ import annotations

import logging
import math
import time
from typing import NamedTuple

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

logger = logging.getLogger(__name__)


class Admission(NamedTuple):
    allowed: bool
    retry_after: int = 0


class RateLimiter:
    """Allow at most ``max_requests`` per source key within ``window_seconds``.

    Windows are kept in process memory by ``limits`` and expire on their
    own. Any internal fault admits the request and is logged.
    """

    def __init__(self, max_requests: int = 1, window_seconds: int = 20) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be at least 1")
        self.max_requests = max_requests
        self.window_seconds = int(window_seconds)
        self._item = RateLimitItemPerSecond(max_requests, self.window_seconds)
        self._storage = MemoryStorage()
        self._strategy = MovingWindowRateLimiter(self._storage)

    def admit(self, source_key: str) -> Admission:
        try:
            if self._strategy.hit(self._item, source_key):
                return Admission(True)
            stats = self._strategy.get_window_stats(self._item, source_key)
            return Admission(False, max(math.ceil(stats.reset_time - time.time()), 0))
        except Exception:
            logger.exception("Rate limiter failed for %r, admitting request", source_key)
            return Admission(True)

    def reset(self) -> None:
        self._storage.reset()


__all__ = ["Admission", "RateLimiter"]
