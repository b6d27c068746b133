"""OpenRouterProvider adapter.

OpenRouter routes Chat Completions requests to many upstream vendors. It asks
clients to identify themselves with the optional ``HTTP-Referer`` and
``X-Title`` headers, taken from the ``referer`` and ``title`` config keys.
OpenRouter also sends SSE comment lines (``: OPENROUTER PROCESSING``) while
waiting for the upstream model; the transport's SSE framing skips them.
"""

from __future__ import annotations

from typing import Dict

from ..base.openai_style_parts import OpenAIStyleProvider


class OpenRouterProvider(OpenAIStyleProvider):
    PROVIDER = "openrouter"
    DEBUG_TAG = "OpenRouterProvider"

    def _vendor_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if referer := self._config.get("referer"):
            headers["HTTP-Referer"] = str(referer)
        if title := self._config.get("title"):
            headers["X-Title"] = str(title)
        return headers


__all__ = ["OpenRouterProvider"]
