"""Cancellation error type.

Defines the public ``CancelledError`` used to signal that a connection or a
chat exchange was cancelled on purpose.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation observes a cooperative cancellation request.

    Adapters treat it as a silent terminal state: it is logged but never
    forwarded to ``on_error``.
    """

__all__ = ["CancelledError"]
