"""
Cancellable execution context handed to a check by the scoring host.
Carries an optional deadline and a cancellation signal that blocked network
calls can be woken by.
"""
import threading
import time
import logging
from typing import Callable, Dict, Optional

from .exceptions import CheckCancelled

logger = logging.getLogger("share_check.context")

CANCELED = "context canceled"
DEADLINE_EXCEEDED = "context deadline exceeded"

class CheckContext:
    """
    Deadline + cancellation carrier.

    Callbacks registered with `on_cancel` run exactly once, on the thread that
    cancels the context (the caller or the deadline timer).
    """

    def __init__(self, deadline: Optional[float] = None):
        # Absolute time.monotonic() value, or None for no deadline
        self.deadline = deadline
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._reason: Optional[str] = None
        self._callbacks: Dict[int, Callable[[], None]] = {}
        self._next_id = 0
        self._timer: Optional[threading.Timer] = None

    @classmethod
    def background(cls) -> "CheckContext":
        """A context that is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "CheckContext":
        ctx = cls(deadline=time.monotonic() + seconds)
        if seconds <= 0:
            ctx.cancel(DEADLINE_EXCEEDED)
            return ctx
        ctx._timer = threading.Timer(seconds, ctx.cancel, args=(DEADLINE_EXCEEDED,))
        ctx._timer.daemon = True
        ctx._timer.start()
        return ctx

    @property
    def cancelled(self) -> bool:
        return self._done.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: str = CANCELED):
        with self._lock:
            if self._done.is_set():
                return
            self._reason = reason
            self._done.set()
            callbacks = list(self._callbacks.values())
            self._callbacks.clear()

        logger.debug("Context cancelled: %s", reason)
        for cb in callbacks:
            try:
                cb()
            except Exception as e:
                logger.warning("Cancellation callback failed: %s", e)

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Registers `callback` to run on cancellation. Returns an unregister
        function. If the context is already cancelled the callback runs now.
        """
        with self._lock:
            if not self._done.is_set():
                handle = self._next_id
                self._next_id += 1
                self._callbacks[handle] = callback

                def unregister():
                    with self._lock:
                        self._callbacks.pop(handle, None)
                return unregister

        callback()
        return lambda: None

    def remaining(self, default: Optional[float] = None) -> Optional[float]:
        """Seconds left before the deadline, or `default` when there is none."""
        if self.deadline is None:
            return default
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_done(self):
        if self._done.is_set():
            raise CheckCancelled(self._reason or CANCELED)
        if self.deadline is not None and time.monotonic() >= self.deadline:
            self.cancel(DEADLINE_EXCEEDED)
            raise CheckCancelled(DEADLINE_EXCEEDED)

    def close(self):
        """Disarms the deadline timer. Does not cancel the context."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
