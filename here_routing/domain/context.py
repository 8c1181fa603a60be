"""Caller-owned cancellation context.

A CallContext travels unchanged from the caller through the services into
the transport. Cancelling it, or letting its deadline pass, makes the
in-flight call fail with RequestCancelledError instead of returning a
response.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .errors import RequestCancelledError


@dataclass
class CallContext:
    """Cancellation signal with an optional deadline.

    Usage:
        ctx = CallContext.with_timeout(5.0)
        service.routes(request, ctx)

        # from another thread
        ctx.cancel()

    Attributes:
        deadline: Monotonic clock value after which the call is expired
    """

    deadline: Optional[float] = None

    _event: threading.Event = field(default_factory=threading.Event, repr=False)
    _callbacks: List[Callable[[], None]] = field(default_factory=list, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @classmethod
    def background(cls) -> CallContext:
        """A context that is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> CallContext:
        """A context that expires ``seconds`` from now."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        """Mark the context cancelled and run the registered callbacks once."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Run ``callback`` when cancel() is called.

        The callback runs immediately if the context is already cancelled.

        Returns:
            A function that unregisters the callback.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return lambda: self._discard(callback)
        callback()
        return lambda: None

    def _discard(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def cancelled(self) -> bool:
        """True once cancel() was called or the deadline passed."""
        return self._event.is_set() or self.expired

    @property
    def reason(self) -> Optional[str]:
        """"cancelled", "deadline exceeded", or None while the context is live."""
        if self._event.is_set():
            return "cancelled"
        if self.expired:
            return "deadline exceeded"
        return None

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_cancelled(self, url: str = "") -> None:
        """Raise RequestCancelledError if the context is done.

        Raises:
            RequestCancelledError: If cancelled or past the deadline.
        """
        if self._event.is_set():
            raise RequestCancelledError("request cancelled", url=url, reason="cancelled")
        if self.expired:
            raise RequestCancelledError(
                "request deadline exceeded", url=url, reason="deadline exceeded"
            )
