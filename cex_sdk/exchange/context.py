"""
Request Context
Caller-supplied cancellation and deadline for rate-limit waits and network calls
"""

import threading
import time
from typing import Optional

from .errors import CancelledError


class RequestContext:
    """
    Cancellation token with an optional deadline

    Shared between the caller and the transport. Blocking waits inside the
    SDK wake up as soon as cancel() is called or the deadline passes.
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize request context

        Args:
            timeout: Seconds until the context expires (None = no deadline)
        """
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._reason = "context cancelled"

    @classmethod
    def background(cls) -> "RequestContext":
        """Context that never expires unless cancelled explicitly"""
        return cls()

    @classmethod
    def with_timeout(cls, timeout: float) -> "RequestContext":
        """Context that expires after `timeout` seconds"""
        return cls(timeout=timeout)

    def cancel(self):
        """Cancel the context, waking every waiter"""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """True once cancelled or past the deadline"""
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._reason = "context deadline exceeded"
            return True
        return False

    @property
    def reason(self) -> str:
        return self._reason

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when there is no deadline"""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def wait(self, seconds: float) -> bool:
        """
        Sleep up to `seconds`, returning early on cancellation

        Args:
            seconds: Maximum time to sleep

        Returns:
            True if the context was cancelled (or expired) during the wait
        """
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            if not self._event.wait(remaining):
                self._reason = "context deadline exceeded"
            return True
        if self._event.wait(seconds):
            return True
        return self.cancelled

    def raise_if_cancelled(self):
        """Raise CancelledError if the context is done"""
        if self.cancelled:
            raise CancelledError(self._reason)
