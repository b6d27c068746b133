"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Covers httpx transport exceptions, HTTP status extraction and a small
message-based heuristic for vendor error payloads that carry no status.
"""
from __future__ import annotations

import asyncio
import json
from typing import Dict, Optional

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    407: ErrorCode.AUTH,
    408: ErrorCode.TIMEOUT,
    504: ErrorCode.TIMEOUT,
    524: ErrorCode.TIMEOUT,
}

_PATTERN_GROUPS = (
    (ErrorCode.TIMEOUT, ("timeout", "timed out", "deadline")),
    (ErrorCode.AUTH, ("unauthenticated", "unauthorized", "api key", "permission", "forbidden")),
    (ErrorCode.CONTENT_BLOCKED, ("safety", "blocked", "content policy")),
    (ErrorCode.NETWORK, ("connection refused", "unreachable", "name resolution", "network")),
    (ErrorCode.MALFORMED_RESPONSE, ("malformed", "invalid json", "decode")),
)


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:
    for code, patterns in _PATTERN_GROUPS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeout exceptions (httpx, asyncio, builtin).
        3. Framing or JSON decode failures.
        4. Remaining transport failures (DNS, refused, reset).
        5. HTTP status mapping.
        6. Message heuristics.
        7. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, (json.JSONDecodeError, httpx.DecodingError, httpx.RemoteProtocolError)):
        return ErrorCode.MALFORMED_RESPONSE
    if isinstance(exc, (httpx.TransportError, ConnectionError)):
        return ErrorCode.NETWORK
    status = _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


def classify_vendor_status(status: Optional[str]) -> ErrorCode:
    """Map a vendor error ``status``/``type`` string to an :class:`ErrorCode`.

    Used for errors delivered inside an otherwise successful stream, where no
    HTTP status is available (``UNAUTHENTICATED``, ``authentication_error`` ...).
    """
    if not status:
        return ErrorCode.UNKNOWN
    code = _heuristic_from_message(status.lower().replace("_", " "))
    if code is not None:
        return code
    lowered = status.lower()
    if lowered.startswith("authentication") or lowered.startswith("permission"):
        return ErrorCode.AUTH
    return ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "classify_vendor_status",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
