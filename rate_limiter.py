"""Fixed-interval rate limiting for calls against the Notion API."""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger('notion_markdown_sync.rate_limiter')

# Notion allows an average of three requests per second
DEFAULT_THROTTLE_MS = 334


class RateLimiter:
    """Keeps remote calls under a fixed request-rate ceiling.

    ``pause()`` always suspends for the full interval and is what the sync
    loop calls between pages. ``acquire()`` is a gate that only sleeps for
    whatever is left of the interval since the previous call, for use in
    front of individual HTTP requests.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], None]] = None
    ):
        """
        Args:
            min_interval: Minimum seconds between calls (0 disables limiting)
            clock: Monotonic clock returning seconds (default: time.monotonic)
            sleep: Sleep function taking seconds (default: time.sleep)
        """
        if min_interval < 0:
            raise ValueError("min_interval must be non-negative")
        self.min_interval = min_interval
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep
        self._last_call: Optional[float] = None

    @classmethod
    def from_milliseconds(cls, interval_ms: float, **kwargs) -> 'RateLimiter':
        """Create a limiter from an interval in milliseconds."""
        return cls(interval_ms / 1000.0, **kwargs)

    @property
    def enabled(self) -> bool:
        return self.min_interval > 0

    def pause(self) -> None:
        """Suspend for the full interval, regardless of elapsed time."""
        if not self.enabled:
            return
        logger.debug(f"Sleeping for {self.min_interval * 1000:.0f} ms...")
        self._sleep(self.min_interval)
        self._last_call = self._clock()

    def acquire(self) -> None:
        """Block until at least ``min_interval`` has passed since the last call."""
        if not self.enabled:
            return

        now = self._clock()
        if self._last_call is not None:
            elapsed = now - self._last_call
            if elapsed < self.min_interval:
                wait_time = self.min_interval - elapsed
                logger.debug(f"Rate limiting: sleeping for {wait_time:.3f}s")
                self._sleep(wait_time)
                now = self._clock()

        self._last_call = now


__all__ = ['RateLimiter', 'DEFAULT_THROTTLE_MS']
