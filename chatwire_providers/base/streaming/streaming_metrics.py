"""Streaming metrics of a single exchange."""
from __future__ import annotations

from dataclasses import dataclass, field
import time
from typing import Optional


@dataclass
class StreamMetrics:
    """Counters and timings collected while an exchange runs.

    Attributes:
        emitted: Number of tokens delivered through ``on_token``.
        emitted_chars: Total length of the delivered text.
        duplicates_dropped: Chunks discarded by dedup.
        decode_errors: Payloads that could not be parsed.
        time_to_first_token_ms: Milliseconds from exchange start to first token.
        total_duration_ms: Milliseconds from exchange start to the terminal state.
    """

    emitted: int = 0
    emitted_chars: int = 0
    duplicates_dropped: int = 0
    decode_errors: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    started_at: float = field(default_factory=time.perf_counter, repr=False)

    def _elapsed_ms(self) -> float:
        return round((time.perf_counter() - self.started_at) * 1000.0, 3)

    def record_token(self, text: str) -> None:
        if self.time_to_first_token_ms is None:
            self.time_to_first_token_ms = self._elapsed_ms()
        self.emitted += 1
        self.emitted_chars += len(text)

    def close(self) -> None:
        if self.total_duration_ms is None:
            self.total_duration_ms = self._elapsed_ms()


__all__ = ["StreamMetrics"]
