"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class that pairs a connection with its
cancel flag. Besides cooperative polling via ``raise_if_cancelled``, callers
can register ``on_cancel`` callbacks, used by the transport to cancel the
asyncio task reading the response body.
"""

from __future__ import annotations

from threading import Lock
from typing import Callable, Optional

from .state import State
from .cancelled_error import CancelledError


class CancellationToken:
    """A one-shot cancellation flag with callback notification.

    Thread-safe: ``cancel`` may be called from any thread. Callbacks run on the
    cancelling thread exactly once; registering after cancellation invokes the
    callback immediately.
    """

    def __init__(self) -> None:
        self._state = State()
        self._lock = Lock()

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> bool:
        """Request cancellation. Returns ``False`` when already cancelled."""
        with self._lock:
            if self._state.cancelled:
                return False
            self._state.cancelled = True
            self._state.reason = reason
            callbacks = list(self._state.callbacks)
            self._state.callbacks.clear()
        for callback in callbacks:
            callback(reason)
        return True

    def on_cancel(self, callback: Callable[[Optional[str]], None]) -> None:
        """Register ``callback(reason)`` to run when the token is cancelled."""
        with self._lock:
            if not self._state.cancelled:
                self._state.callbacks.append(callback)
                return
            reason = self._state.reason
        callback(reason)

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._state.cancelled}, reason={self._state.reason!r})"


__all__ = ["CancellationToken"]
