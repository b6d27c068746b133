"""OpenAIProvider adapter (Chat Completions streaming over SSE)."""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleProvider


class OpenAIProvider(OpenAIStyleProvider):
    PROVIDER = "openai"
    DEBUG_TAG = "OpenAIProvider"


__all__ = ["OpenAIProvider"]
