"""Gemini request building and chunk inspection helpers.

Pure functions over plain dicts so the wire format can be tested without a
transport. Chunk shape (``streamGenerateContent?alt=sse``)::

    {"responseId": "...",
     "candidates": [{"content": {"role": "model", "parts": [{"text": "..."}]},
                     "finishReason": "STOP"}],
     "promptFeedback": {"blockReason": "SAFETY"},
     "usageMetadata": {...}}
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from ..base.models import StreamRequest

COMPLETION_FINISH_REASONS = frozenset({"STOP", "MAX_TOKENS", "FINISH_REASON_UNSPECIFIED", "OTHER"})
BLOCKING_FINISH_REASONS = frozenset(
    {"SAFETY", "RECITATION", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII", "IMAGE_SAFETY"}
)


def build_stream_url(base_url: str, model: str) -> str:
    """``{base}/models/{model}:streamGenerateContent?alt=sse``; a ``models/`` prefix on the id is accepted."""
    model_id = model[len("models/"):] if model.startswith("models/") else model
    return f"{base_url.rstrip('/')}/models/{quote(model_id, safe='-._~')}:streamGenerateContent?alt=sse"


def build_headers(api_key: str) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "x-goog-api-key": api_key,
        "Accept": "text/event-stream",
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
    }


def _contents_role(role: str) -> str:
    return "user" if role == "user" else "model"


def build_request_body(
    request: StreamRequest,
    *,
    default_temperature: float,
    default_thinking_budget: int,
) -> Dict[str, Any]:
    """Build the ``generateContent`` body.

    Every non-user role maps to ``model``. With the ``system_as_instruction``
    option, system messages and ``system_instruction`` go to
    ``systemInstruction`` instead of the conversation.
    """
    options = request.options
    extras = options.extra_options()
    as_instruction = bool(extras.pop("system_as_instruction", False))

    messages = request.conversation() if as_instruction else request.messages
    body: Dict[str, Any] = {
        "contents": [{"role": _contents_role(m.role), "parts": [{"text": m.content}]} for m in messages],
    }
    if as_instruction and (system_text := request.system_text()):
        body["systemInstruction"] = {"parts": [{"text": system_text}]}
    elif not as_instruction and options.system_instruction:
        body["contents"].insert(0, {"role": "model", "parts": [{"text": options.system_instruction}]})

    generation: Dict[str, Any] = {
        "temperature": options.temperature if options.temperature is not None else default_temperature,
        "thinkingConfig": {
            "thinkingBudget": options.thinking_budget
            if options.thinking_budget is not None
            else default_thinking_budget
        },
    }
    if options.max_output_tokens is not None:
        generation["maxOutputTokens"] = options.max_output_tokens
    if options.top_p is not None:
        generation["topP"] = options.top_p
    generation.update(extras)
    body["generationConfig"] = generation
    return body


def _first_candidate(chunk: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    candidates = chunk.get("candidates")
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], Mapping):
        return candidates[0]
    return None


def extract_texts(chunk: Mapping[str, Any]) -> List[str]:
    """Text of ``candidates[0].content.parts`` in order; thought parts are skipped."""
    candidate = _first_candidate(chunk)
    if candidate is None:
        return []
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, Mapping) else None
    if not isinstance(parts, list):
        return []
    texts: List[str] = []
    for part in parts:
        if not isinstance(part, Mapping) or part.get("thought"):
            continue
        text = part.get("text")
        if isinstance(text, str):
            texts.append(text)
    return texts


def extract_finish_reason(chunk: Mapping[str, Any]) -> Optional[str]:
    candidate = _first_candidate(chunk)
    reason = candidate.get("finishReason") if candidate is not None else None
    return reason if isinstance(reason, str) and reason else None


def extract_block_reason(chunk: Mapping[str, Any]) -> Optional[str]:
    feedback = chunk.get("promptFeedback")
    if not isinstance(feedback, Mapping):
        return None
    reason = feedback.get("blockReason")
    return reason if isinstance(reason, str) and reason else None


def extract_response_id(chunk: Mapping[str, Any]) -> Optional[str]:
    response_id = chunk.get("responseId")
    return response_id if isinstance(response_id, str) and response_id else None


__all__ = [
    "BLOCKING_FINISH_REASONS",
    "COMPLETION_FINISH_REASONS",
    "build_headers",
    "build_request_body",
    "build_stream_url",
    "extract_block_reason",
    "extract_finish_reason",
    "extract_response_id",
    "extract_texts",
]
