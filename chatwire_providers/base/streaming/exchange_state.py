"""Lifecycle states of a streaming exchange."""
from __future__ import annotations

from enum import Enum


class ExchangeState(str, Enum):
    """``IDLE -> CONNECTING -> STREAMING -> (COMPLETE | FAILED | CANCELLED)``.

    ``CONNECTING`` may also move straight to a terminal state (no key, HTTP
    error, cancelled before the connection opened).
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (ExchangeState.COMPLETE, ExchangeState.FAILED, ExchangeState.CANCELLED)


__all__ = ["ExchangeState"]
