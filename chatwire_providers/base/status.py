"""Provider status mapping for the UI boundary.

Turns a :class:`CheckResult` into the coarse status a provider list shows and
the hint text displayed next to it.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from .models import CheckReason, CheckResult

DEFAULT_FAILURE_MESSAGE = "Connection failed"

_TOOLTIPS = {
    CheckReason.AUTH: "Authentication failed, check the API key",
    CheckReason.NETWORK: "Network error or service unreachable",
    CheckReason.TIMEOUT: "Connection timed out, try again later",
}


class ProviderStatus(str, Enum):
    CONNECTED = "CONNECTED"
    NOT_CONNECTED = "NOT_CONNECTED"
    NO_KEY = "NO_KEY"
    CONNECTING = "CONNECTING"
    UNKNOWN = "UNKNOWN"


def status_from_check(result: Optional[CheckResult]) -> ProviderStatus:
    """``None`` (no check run yet) maps to ``UNKNOWN``."""
    if result is None:
        return ProviderStatus.UNKNOWN
    if result.ok:
        return ProviderStatus.CONNECTED
    if result.reason is CheckReason.NO_KEY:
        return ProviderStatus.NO_KEY
    return ProviderStatus.NOT_CONNECTED


def status_tooltip(
    status: ProviderStatus,
    reason: Optional[CheckReason] = None,
    message: Optional[str] = None,
) -> Optional[str]:
    """Hint text for a status; ``None`` when the status needs no explanation."""
    if status is ProviderStatus.NO_KEY:
        return "API key not configured"
    if status is ProviderStatus.NOT_CONNECTED:
        return _TOOLTIPS.get(reason) or message or DEFAULT_FAILURE_MESSAGE  # type: ignore[arg-type]
    return None


def tooltip_for_check(result: CheckResult) -> Optional[str]:
    return status_tooltip(status_from_check(result), result.reason, result.message)


__all__ = ["ProviderStatus", "status_from_check", "status_tooltip", "tooltip_for_check", "DEFAULT_FAILURE_MESSAGE"]
