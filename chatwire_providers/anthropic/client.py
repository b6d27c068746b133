"""AnthropicProvider adapter.

Streams the Messages API (``POST {base_url}/messages`` with ``stream: true``)
over SSE. System messages travel in the top-level ``system`` field and
``max_tokens`` is always sent.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..base.chat_provider import BaseChatProvider
from ..base.errors import ErrorCode
from ..base.logging import LogContext, normalized_log_event
from ..base.models import CheckResult, ModelInfo, StreamRequest
from ..base.streaming import StreamDispatcher
from ..base.transport import ConnectionConfig
from ..config.defaults import ANTHROPIC_API_VERSION, ANTHROPIC_DEFAULT_MAX_TOKENS
from .stream_helpers import (
    REFUSAL_STOP_REASON,
    build_request_body,
    extract_message_id,
    extract_models,
    extract_stop_reason,
    extract_text_delta,
)


class AnthropicProvider(BaseChatProvider):
    """Claude streaming chat adapter."""

    PROVIDER = "anthropic"
    DEBUG_TAG = "AnthropicProvider"

    def _headers(self, api_key: Optional[str]) -> Dict[str, str]:
        return {
            "x-api-key": api_key or "",
            "anthropic-version": str(self._config.get("api_version") or ANTHROPIC_API_VERSION),
            **self._extra_headers,
        }

    def _build_connection(self, request: StreamRequest, api_key: Optional[str]) -> ConnectionConfig:
        body = build_request_body(
            request,
            default_max_tokens=int(self._config.get("max_tokens") or ANTHROPIC_DEFAULT_MAX_TOKENS),
            default_temperature=self._config.get("temperature"),
        )
        headers = {"Content-Type": "application/json", "Accept": "text/event-stream", **self._headers(api_key)}
        return ConnectionConfig(
            url=f"{self._base_url}/messages",
            method="POST",
            headers=headers,
            body=body,
            framing="sse",
            debug_tag=self.DEBUG_TAG,
        )

    def _handle_payload(self, dispatcher: StreamDispatcher, payload: str) -> None:
        event = self._decode_json(dispatcher, payload)
        if event is None:
            return
        event_type = event.get("type")
        if event_type == "error":
            self._finish(dispatcher, self._error_from_payload(event.get("error") or {}, dispatcher.model))
            return
        if (message_id := extract_message_id(event)) is not None:
            dispatcher.ctx.response_id = message_id
            return
        if (text := extract_text_delta(event)) is not None:
            dispatcher.token(text)
            return
        stop_reason = extract_stop_reason(event)
        if stop_reason == REFUSAL_STOP_REASON:
            self._finish(dispatcher, self._error(ErrorCode.CONTENT_BLOCKED, "response refused", dispatcher.model))
        elif stop_reason:
            normalized_log_event(
                self._logger,
                "stream.finish_reason",
                dispatcher.ctx,
                phase="stream",
                level=logging.DEBUG,
                emitted=dispatcher.metrics.emitted > 0,
                finish_reason=stop_reason,
            )
        elif event_type == "message_stop":
            self._finish(dispatcher)

    async def _probe(self, api_key: Optional[str]) -> CheckResult:
        await self._http_get(f"{self._base_url}/models", headers=self._headers(api_key), params={"limit": 1})
        return CheckResult.success()

    async def fetch_models(self) -> Optional[List[ModelInfo]]:
        """Live ``/models`` listing with display names; the static catalog on failure."""
        ctx = LogContext(provider=self.provider_name)
        try:
            api_key = await self.get_api_key(None)
            if not api_key:
                return self._static_models()
            response = await self._http_get(f"{self._base_url}/models", headers=self._headers(api_key))
            entries = extract_models(response.json())
        except Exception as exc:  # listing is best-effort; the catalog covers failures
            normalized_log_event(
                self._logger,
                "models.fetch_error",
                ctx,
                phase="models",
                level=logging.WARNING,
                emitted=None,
                error_type=type(exc).__name__,
                error=str(exc)[:200],
            )
            return self._static_models()
        normalized_log_event(self._logger, "models.fetched", ctx, phase="models", emitted=None, count=len(entries))
        return [ModelInfo(id=e["id"], label=e["label"], aliases=[e["id"]]) for e in entries]


__all__ = ["AnthropicProvider"]
