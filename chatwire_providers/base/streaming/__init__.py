"""Streaming package for the provider layer.

Exchange state, duplicate suppression, guarded callback delivery, metrics and
the async iterator facade.
"""

from .callbacks import StreamCallbacks
from .dedup import ChunkDeduplicator
from .dispatcher import StreamDispatcher
from .exchange_state import ExchangeState
from .stream_controller import StreamController
from .streaming import AccumulatedStream, ChatStreamEvent, accumulate_events
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics

__all__ = [
    "AccumulatedStream",
    "ChatStreamEvent",
    "ChunkDeduplicator",
    "ExchangeState",
    "StreamCallbacks",
    "StreamController",
    "StreamDispatcher",
    "StreamMetrics",
    "accumulate_events",
    "finalize_stream",
]
