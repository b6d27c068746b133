"""
Message DTO used across providers.

Defines the `Message` dataclass and the `Role` literal. Adapters map the
role onto the vendor's vocabulary (Gemini: ``user``/``model``; chat
completions: ``system``/``user``/``assistant``).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Literal, Mapping, Union

Role = Literal["system", "user", "assistant", "model"]


@dataclass(frozen=True)
class Message:
    """One chat message: a role and plain text content.

    Methods:
        from_mapping: Build from a ``{"role": ..., "content": ...}`` mapping.
        is_user: True for user messages.
    """

    role: Role
    content: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Message":
        """Build a message from a plain mapping, as sent by UI layers.

        Raises:
            ValueError: when ``role`` is missing or ``content`` is not a string.
        """
        role = data.get("role")
        content = data.get("content", "")
        if not role:
            raise ValueError("message role is required")
        if content is None:
            content = ""
        if not isinstance(content, str):
            raise ValueError(f"message content must be text, got {type(content).__name__}")
        return cls(role=str(role), content=content)  # type: ignore[arg-type]

    def is_user(self) -> bool:
        return self.role == "user"

    def is_system(self) -> bool:
        return self.role == "system"


def coerce_messages(messages: Iterable[Union[Message, Mapping[str, Any]]]) -> List[Message]:
    """Normalize a mixed sequence of ``Message`` objects and mappings."""
    return [m if isinstance(m, Message) else Message.from_mapping(m) for m in messages]


__all__ = ["Message", "Role", "coerce_messages"]
