"""DeepseekProvider adapter.

DeepSeek serves the Chat Completions protocol at ``https://api.deepseek.com/v1``.
``deepseek-reasoner`` streams its reasoning in ``delta.reasoning_content``,
which is not part of the answer and is not emitted.
"""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleProvider


class DeepseekProvider(OpenAIStyleProvider):
    PROVIDER = "deepseek"
    DEBUG_TAG = "DeepseekProvider"


__all__ = ["DeepseekProvider"]
