"""Structured logging context carried by every stream and probe event."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Common fields of a provider log event.

    ``exchange_id`` correlates every event of one ``chat_stream`` call;
    ``response_id`` is the vendor's response identity when known.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    exchange_id: Optional[int] = None
    response_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
