"""
Rate Limiter
Thread-safe token bucket, one instance per API class
"""

import threading
import time
from typing import Callable, Optional

from .context import RequestContext
from .errors import CancelledError, InvalidInputError


class RateLimiter:
    """
    Token bucket rate limiter

    Starts full with `capacity` tokens. Tokens refill lazily on access: one
    token per whole `interval` elapsed since the last refill, capped at
    `capacity`. The lock is never held while a caller sleeps.
    """

    def __init__(self, capacity: int, interval: float,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize rate limiter

        Args:
            capacity: Maximum number of tokens (requests per interval)
            interval: Refill period in seconds
            clock: Monotonic time source
        """
        if capacity < 1:
            raise InvalidInputError(f"rate limit capacity must be at least 1, got {capacity}")
        if interval <= 0:
            raise InvalidInputError(f"rate limit interval must be positive, got {interval}")

        self.capacity = capacity
        self.interval = float(interval)
        self._clock = clock
        self._tokens = capacity
        self._last_refill = clock()
        self._lock = threading.Lock()

    def _refill(self, now: float):
        """Add one token per whole interval elapsed (caller holds the lock)"""
        elapsed = now - self._last_refill
        if elapsed >= self.interval:
            periods = int(elapsed // self.interval)
            self._tokens = min(self.capacity, self._tokens + periods)
            self._last_refill = now

    def _time_to_next_refill(self, now: float) -> float:
        return self.interval - ((now - self._last_refill) % self.interval)

    @property
    def available(self) -> int:
        """Tokens available right now"""
        with self._lock:
            self._refill(self._clock())
            return self._tokens

    def try_acquire(self) -> bool:
        """
        Consume a token only if one is immediately available

        Returns:
            True if a token was consumed
        """
        with self._lock:
            self._refill(self._clock())
            if self._tokens <= 0:
                return False
            self._tokens -= 1
            return True

    def wait(self, ctx: Optional[RequestContext] = None):
        """
        Block until a token is available, then consume it

        After every sleep the full refill computation runs again, so a waiter
        only proceeds once a token has genuinely been refilled.

        Args:
            ctx: Cancellation context (None = wait indefinitely)

        Raises:
            CancelledError: ctx was cancelled or expired while waiting
        """
        while True:
            with self._lock:
                now = self._clock()
                self._refill(now)
                if self._tokens > 0:
                    self._tokens -= 1
                    return
                wait_time = self._time_to_next_refill(now)

            if ctx is None:
                time.sleep(wait_time)
            elif ctx.wait(wait_time):
                raise CancelledError(ctx.reason)

    def __repr__(self) -> str:
        return f"RateLimiter(capacity={self.capacity}, interval={self.interval})"
