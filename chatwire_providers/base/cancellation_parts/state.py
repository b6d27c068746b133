"""Internal state holder for cancellation tokens."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional


@dataclass
class State:
    """Cancel flag, reason and pending callbacks of a token."""

    cancelled: bool = False
    reason: Optional[str] = None
    callbacks: List[Callable[[Optional[str]], None]] = field(default_factory=list)


__all__ = ["State"]
