"""
Structured provider error exception type.

Wraps transport and vendor failures with a normalized `ErrorCode` so callers
can branch on the category without knowing which backend produced it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """A classified failure delivered through ``on_error``.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable message suitable for logs and UI toasts.
        provider: Provider key where the error originated (e.g. ``"gemini"``).
        model: Optional model identifier of the failed exchange.
        status_code: HTTP status when the failure came from a non-success response.
        raw: The underlying exception (transport error, decode error) if any.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    status_code: Optional[int] = None
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"

    @property
    def is_content_policy(self) -> bool:
        return self.code is ErrorCode.CONTENT_BLOCKED


__all__ = ["ProviderError"]
