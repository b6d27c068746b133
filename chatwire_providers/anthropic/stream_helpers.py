"""Anthropic Messages API request building and event inspection.

Streaming events arrive as SSE events whose JSON ``type`` names them:
``message_start``, ``content_block_start``, ``content_block_delta``,
``content_block_stop``, ``message_delta``, ``message_stop``, ``ping`` and
``error``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.models import StreamRequest

REFUSAL_STOP_REASON = "refusal"


def build_messages(request: StreamRequest) -> List[Dict[str, str]]:
    """Non-system messages with ``model`` normalized to ``assistant``."""
    return [
        {"role": "user" if m.role == "user" else "assistant", "content": m.content}
        for m in request.conversation()
    ]


def build_request_body(
    request: StreamRequest,
    *,
    default_max_tokens: int,
    default_temperature: Optional[float],
) -> Dict[str, Any]:
    options = request.options
    body: Dict[str, Any] = {
        "model": request.model,
        "max_tokens": options.max_output_tokens or default_max_tokens,
        "messages": build_messages(request),
        "stream": True,
    }
    if system_text := request.system_text():
        body["system"] = system_text
    if options.thinking_budget:
        # Extended thinking requires temperature 1, so no temperature is sent.
        body["thinking"] = {"type": "enabled", "budget_tokens": options.thinking_budget}
    else:
        temperature = options.temperature if options.temperature is not None else default_temperature
        if temperature is not None:
            body["temperature"] = temperature
    if options.top_p is not None:
        body["top_p"] = options.top_p
    body.update(options.extra_options())
    return body


def extract_text_delta(event: Mapping[str, Any]) -> Optional[str]:
    """Text of a ``content_block_delta`` event with a ``text_delta``."""
    if event.get("type") != "content_block_delta":
        return None
    delta = event.get("delta")
    if not isinstance(delta, Mapping) or delta.get("type") != "text_delta":
        return None
    text = delta.get("text")
    return text if isinstance(text, str) and text else None


def extract_stop_reason(event: Mapping[str, Any]) -> Optional[str]:
    if event.get("type") != "message_delta":
        return None
    delta = event.get("delta")
    reason = delta.get("stop_reason") if isinstance(delta, Mapping) else None
    return reason if isinstance(reason, str) and reason else None


def extract_message_id(event: Mapping[str, Any]) -> Optional[str]:
    if event.get("type") != "message_start":
        return None
    message = event.get("message")
    message_id = message.get("id") if isinstance(message, Mapping) else None
    return message_id if isinstance(message_id, str) else None


def extract_models(listing: Mapping[str, Any]) -> List[Dict[str, Optional[str]]]:
    """``[{"id", "label"}]`` from ``GET /models`` (``data[].id`` / ``display_name``)."""
    data = listing.get("data")
    if not isinstance(data, list):
        return []
    return [
        {"id": str(item["id"]), "label": item.get("display_name")}
        for item in data
        if isinstance(item, Mapping) and item.get("id")
    ]


__all__ = [
    "REFUSAL_STOP_REASON",
    "build_messages",
    "build_request_body",
    "extract_message_id",
    "extract_models",
    "extract_stop_reason",
    "extract_text_delta",
]
