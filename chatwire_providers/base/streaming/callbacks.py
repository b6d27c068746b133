"""Caller-side callback bundle of one streaming exchange."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from ..errors import ProviderError


@dataclass
class StreamCallbacks:
    """Callbacks a caller passes to ``chat_stream``. All are optional.

    Per exchange: ``on_start`` at most once, then zero or more ``on_token``,
    then at most one of ``on_complete`` / ``on_error``. A cancelled exchange
    ends without a terminal callback.
    """

    on_start: Optional[Callable[[], None]] = None
    on_token: Optional[Callable[[str], None]] = None
    on_complete: Optional[Callable[[], None]] = None
    on_error: Optional[Callable[[ProviderError], None]] = None


__all__ = ["StreamCallbacks"]
