"""
Normalized failure codes (taxonomy).

Defines the `ErrorCode` enumeration every adapter uses to classify failures
before they reach the caller. Values are lowercase snake_case and form a
stable contract for logging and for the UI layer that renders errors.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated failure categories surfaced by the streaming layer.

    ``CANCELLED`` is internal: caller-initiated cancellation is never reported
    through ``on_error``, but the code is still used for log events and by the
    async iterator facade.
    """

    NO_CREDENTIAL = "no_credential"
    AUTH = "auth"
    NETWORK = "network"
    TIMEOUT = "timeout"
    CONTENT_BLOCKED = "content_blocked"
    MALFORMED_RESPONSE = "malformed_response"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
