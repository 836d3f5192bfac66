"""
Deadline and cancellation for a single batch submission.

Usage:
    from catalog_batch import RequestContext

    ctx = RequestContext.with_timeout(30)
    client = client.with_context(ctx)
    # from another thread
    ctx.cancel()
"""
import threading
import time
from typing import Optional


class RequestContext:
    """Caller-owned deadline plus a thread-safe cancel flag"""

    def __init__(self, deadline: Optional[float] = None):
        # deadline is on the time.monotonic() clock
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> "RequestContext":
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self):
        self._cancelled.set()

    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is none"""
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def error(self) -> Optional[str]:
        """Why the context is done, or None while it is still live"""
        if self.cancelled():
            return "context cancelled"
        if self.expired():
            return "context deadline exceeded"
        return None


BACKGROUND = RequestContext()
