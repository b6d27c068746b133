"""Duplicate chunk suppression keyed by response identity and text length.

Some backends (and some proxies in front of them) deliver the same streamed
chunk twice. A chunk is identified by the response it belongs to plus the
length of its first text part; a second chunk with the same fingerprint is
dropped.

Known approximation: two distinct chunks of one response whose first text
parts have equal length collide, and the second is dropped. Chunks without
a response identity share the ``None`` identity.
"""
from __future__ import annotations

from typing import Optional, Set, Tuple

Fingerprint = Tuple[Optional[str], int]


class ChunkDeduplicator:
    """Per-exchange dedup state: tracked identity, seen fingerprints, emitted length."""

    def __init__(self) -> None:
        self.response_id: Optional[str] = None
        self.content_length = 0
        self._seen: Set[Fingerprint] = set()

    def reset(self) -> None:
        """Forget everything (start of an exchange)."""
        self.response_id = None
        self.content_length = 0
        self._seen.clear()

    def observe_identity(self, response_id: Optional[str]) -> bool:
        """Track the response identity of a chunk.

        A different, non-empty identity starts a new logical response: seen
        fingerprints and the emitted length are cleared. Returns ``True`` when
        that happened.
        """
        if not response_id or response_id == self.response_id:
            return False
        self.response_id = response_id
        self.content_length = 0
        self._seen.clear()
        return True

    def fingerprint(self, text_length: int) -> Fingerprint:
        return (self.response_id, text_length)

    def register(self, text_length: int) -> bool:
        """Record a chunk fingerprint. Returns ``False`` if it was already seen."""
        key = self.fingerprint(text_length)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def record_emitted(self, text_length: int) -> None:
        self.content_length += text_length

    @property
    def seen_count(self) -> int:
        return len(self._seen)


__all__ = ["ChunkDeduplicator", "Fingerprint"]
