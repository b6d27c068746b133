"""Streaming primitives for the provider layer.

``ChatStreamEvent`` is the pull-style view of an exchange used by
:class:`StreamController`; adapters themselves only speak callbacks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..errors import ProviderError


@dataclass
class ChatStreamEvent:
    """Represents an incremental delta or the terminal event of an exchange.

    Fields:
      provider: canonical provider name
      model: model id
      delta: text fragment (``None`` for the terminal event)
      finish: True on the final event
      error: classified error on failed or cancelled exchanges
    """

    provider: str
    model: str
    delta: Optional[str]
    finish: bool = False
    error: Optional[ProviderError] = None

    def is_error(self) -> bool:
        return self.error is not None


@dataclass
class AccumulatedStream:
    """Concatenated text of an exchange plus its terminal error, if any."""

    text: str
    error: Optional[ProviderError] = None
    events: List[ChatStreamEvent] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


def accumulate_events(events: Iterable[ChatStreamEvent]) -> AccumulatedStream:
    """Accumulate events into their concatenated text.

    Text received before a failure is kept, so a blocked response still shows
    what was streamed before the block.
    """
    events_list = list(events)
    text = "".join(e.delta for e in events_list if e.delta)
    error = next((e.error for e in events_list if e.error is not None), None)
    return AccumulatedStream(text=text, error=error, events=events_list)


__all__ = ["ChatStreamEvent", "AccumulatedStream", "accumulate_events"]
