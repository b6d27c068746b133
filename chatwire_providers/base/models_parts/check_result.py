"""
Connection check result DTO.

``check_connection`` never raises: every outcome is a :class:`CheckResult`
whose ``reason`` tells a settings screen what to show.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import ErrorCode, classify_exception


class CheckReason(str, Enum):
    """Why a connection check failed."""

    NO_KEY = "NO_KEY"
    AUTH = "AUTH"
    NETWORK = "NETWORK"
    TIMEOUT = "TIMEOUT"
    UNKNOWN = "UNKNOWN"


_REASON_BY_CODE = {
    ErrorCode.NO_CREDENTIAL: CheckReason.NO_KEY,
    ErrorCode.AUTH: CheckReason.AUTH,
    ErrorCode.NETWORK: CheckReason.NETWORK,
    ErrorCode.TIMEOUT: CheckReason.TIMEOUT,
}


def check_reason_for(code: ErrorCode) -> CheckReason:
    """Map an :class:`ErrorCode` onto the coarser :class:`CheckReason`."""
    return _REASON_BY_CODE.get(code, CheckReason.UNKNOWN)


@dataclass(frozen=True)
class CheckResult:
    """Outcome of ``check_connection``.

    Attributes:
        ok: True when the backend is usable.
        reason: Failure category; ``None`` when ``ok``.
        message: Optional human-readable detail.
    """

    ok: bool
    reason: Optional[CheckReason] = None
    message: Optional[str] = None

    @classmethod
    def success(cls) -> "CheckResult":
        return cls(ok=True)

    @classmethod
    def no_key(cls) -> "CheckResult":
        return cls(ok=False, reason=CheckReason.NO_KEY, message="API key not configured")

    @classmethod
    def from_error(cls, exc: BaseException) -> "CheckResult":
        """Classify a probe failure."""
        return cls(ok=False, reason=check_reason_for(classify_exception(exc)), message=str(exc) or type(exc).__name__)


__all__ = ["CheckReason", "CheckResult", "check_reason_for"]
