"""Minimum-spacing request throttle shared by the search-only providers."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """Enforce a minimum interval between requests to each provider.

    Intervals are given in milliseconds per provider name. A provider with no
    interval (or a non-positive one) is never delayed.
    """

    def __init__(
        self,
        intervals_ms: Optional[Mapping[str, int]] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self._intervals = {
            name: max(0, int(ms)) / 1000.0 for name, ms in (intervals_ms or {}).items()
        }
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep
        self._last_request: Dict[str, float] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, provider: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(provider)
            if lock is None:
                lock = self._locks[provider] = threading.Lock()
            return lock

    def interval_for(self, provider: str) -> float:
        return self._intervals.get(provider, 0.0)

    def throttle(self, provider: str) -> float:
        """Block until ``provider`` may issue its next request.

        The wait and the timestamp update happen under one per-provider lock,
        so concurrent callers are spaced out rather than released together.
        Returns the number of seconds slept.
        """
        interval = self.interval_for(provider)
        if interval <= 0:
            return 0.0

        with self._lock_for(provider):
            waited = 0.0
            last = self._last_request.get(provider)
            if last is not None:
                remaining = interval - (self._clock() - last)
                if remaining > 0:
                    logger.debug("Throttling %s request for %.3fs", provider, remaining)
                    self._sleep(remaining)
                    waited = remaining
            self._last_request[provider] = self._clock()
            return waited


__all__ = ["RateLimiter"]
