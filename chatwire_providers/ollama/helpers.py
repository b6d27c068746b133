"""Ollama helpers module.

Purpose:
- Side-effect-free builders and chunk accessors for the Ollama ``/api/chat``
  streaming protocol (newline-delimited JSON objects).

Chunk shape::

    {"model": "...", "message": {"role": "assistant", "content": "..."}, "done": false}
    {"model": "...", "done": true, "done_reason": "stop", "eval_count": 42}
    {"error": "model 'x' not found"}
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.models import StreamRequest


def build_chat_payload(request: StreamRequest, *, default_temperature: Optional[float]) -> Dict[str, Any]:
    options = request.options
    messages: List[Dict[str, str]] = []
    if options.system_instruction:
        messages.append({"role": "system", "content": options.system_instruction})
    messages.extend(
        {"role": "assistant" if m.role == "model" else m.role, "content": m.content} for m in request.messages
    )
    model_options: Dict[str, Any] = {}
    temperature = options.temperature if options.temperature is not None else default_temperature
    if temperature is not None:
        model_options["temperature"] = temperature
    if options.top_p is not None:
        model_options["top_p"] = options.top_p
    if options.max_output_tokens is not None:
        model_options["num_predict"] = options.max_output_tokens
    model_options.update(options.extra_options())
    payload: Dict[str, Any] = {"model": request.model, "messages": messages, "stream": True}
    if model_options:
        payload["options"] = model_options
    return payload


def extract_content(chunk: Mapping[str, Any]) -> Optional[str]:
    message = chunk.get("message")
    content = message.get("content") if isinstance(message, Mapping) else None
    return content if isinstance(content, str) and content else None


def is_done(chunk: Mapping[str, Any]) -> bool:
    return chunk.get("done") is True


def extract_model_names(tags: Mapping[str, Any]) -> List[str]:
    """Installed model names from ``GET /api/tags``."""
    models = tags.get("models")
    if not isinstance(models, list):
        return []
    return [str(m["name"]) for m in models if isinstance(m, Mapping) and m.get("name")]


__all__ = ["build_chat_payload", "extract_content", "extract_model_names", "is_done"]
