"""Normalized input of one streaming exchange."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .message import Message
from .stream_options import StreamOptions


@dataclass
class StreamRequest:
    """Model, ordered conversation and options handed to an adapter."""

    model: str
    messages: List[Message]
    options: StreamOptions = field(default_factory=StreamOptions)

    def system_text(self) -> str:
        """System messages plus ``options.system_instruction`` joined by blank lines."""
        parts = [m.content for m in self.messages if m.is_system() and m.content]
        if self.options.system_instruction:
            parts.append(self.options.system_instruction)
        return "\n\n".join(parts)

    def conversation(self) -> List[Message]:
        """Messages without the system ones."""
        return [m for m in self.messages if not m.is_system()]


__all__ = ["StreamRequest"]
