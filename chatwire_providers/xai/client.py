"""XAIProvider adapter (Grok models over the Chat Completions protocol)."""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleProvider


class XAIProvider(OpenAIStyleProvider):
    PROVIDER = "xai"
    DEBUG_TAG = "XAIProvider"


__all__ = ["XAIProvider"]
