"""Chat Completions wire helpers shared by OpenAI-compatible adapters.

Pure functions over plain dicts. Streaming chunk shape::

    {"id": "...", "choices": [{"index": 0,
                               "delta": {"content": "..."},
                               "finish_reason": null}]}
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..constants import SSE_DONE_SENTINEL
from ..models import StreamRequest

CONTENT_FILTER_FINISH_REASON = "content_filter"

_ROLE_MAP = {"model": "assistant"}


def build_chat_messages(request: StreamRequest) -> List[Dict[str, str]]:
    """Conversation as ``[{role, content}]``; ``system_instruction`` is prepended as a system message."""
    messages: List[Dict[str, str]] = []
    if request.options.system_instruction:
        messages.append({"role": "system", "content": request.options.system_instruction})
    for m in request.messages:
        messages.append({"role": _ROLE_MAP.get(m.role, m.role), "content": m.content})
    return messages


def build_chat_body(request: StreamRequest, *, default_temperature: Optional[float]) -> Dict[str, Any]:
    options = request.options
    body: Dict[str, Any] = {
        "model": request.model,
        "messages": build_chat_messages(request),
        "stream": True,
    }
    temperature = options.temperature if options.temperature is not None else default_temperature
    if temperature is not None:
        body["temperature"] = temperature
    if options.max_output_tokens is not None:
        body["max_tokens"] = options.max_output_tokens
    if options.top_p is not None:
        body["top_p"] = options.top_p
    body.update(options.extra_options())
    return body


def is_done_sentinel(payload: str) -> bool:
    return payload.strip() == SSE_DONE_SENTINEL


def _first_choice(chunk: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    choices = chunk.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], Mapping):
        return choices[0]
    return None


def extract_delta_text(chunk: Mapping[str, Any]) -> Optional[str]:
    choice = _first_choice(chunk)
    delta = choice.get("delta") if choice is not None else None
    content = delta.get("content") if isinstance(delta, Mapping) else None
    return content if isinstance(content, str) and content else None


def extract_finish_reason(chunk: Mapping[str, Any]) -> Optional[str]:
    choice = _first_choice(chunk)
    reason = choice.get("finish_reason") if choice is not None else None
    return reason if isinstance(reason, str) and reason else None


def extract_model_ids(listing: Mapping[str, Any]) -> List[str]:
    """Model ids of a ``GET /models`` response (``{"data": [{"id": ...}]}``), sorted."""
    data = listing.get("data")
    if not isinstance(data, list):
        return []
    return sorted({str(item["id"]) for item in data if isinstance(item, Mapping) and item.get("id")})


__all__ = [
    "CONTENT_FILTER_FINISH_REASON",
    "build_chat_body",
    "build_chat_messages",
    "extract_delta_text",
    "extract_finish_reason",
    "extract_model_ids",
    "is_done_sentinel",
]
