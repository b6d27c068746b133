"""OpenAIStyleProvider: shared adapter for Chat Completions compatible backends.

Purpose:
    One implementation of the ``POST {base_url}/chat/completions`` streaming
    protocol for OpenAI, DeepSeek, xAI and OpenRouter. Subclasses only set the
    provider key, the debug tag and any vendor headers.

Stream semantics:
    - ``data: [DONE]`` completes the exchange.
    - ``choices[0].delta.content`` is emitted verbatim.
    - ``finish_reason == "content_filter"`` fails with ``CONTENT_BLOCKED``;
      other finish reasons are recorded and completion follows ``[DONE]`` or
      the end of the body.
    - An ``error`` object fails the exchange.

Model listing:
    ``GET {base_url}/models``; any failure falls back to the static catalog.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..chat_provider import BaseChatProvider
from ..errors import ErrorCode
from ..logging import LogContext, normalized_log_event
from ..models import CheckResult, ModelInfo, StreamRequest
from ..streaming import StreamDispatcher
from ..transport import ConnectionConfig
from .style_helpers import (
    CONTENT_FILTER_FINISH_REASON,
    build_chat_body,
    extract_delta_text,
    extract_finish_reason,
    extract_model_ids,
    is_done_sentinel,
)


class OpenAIStyleProvider(BaseChatProvider):
    """Chat Completions streaming adapter; subclass per vendor."""

    PROVIDER = "openai"
    DEBUG_TAG = "OpenAIStyleProvider"

    def _auth_headers(self, api_key: Optional[str]) -> Dict[str, str]:
        return {"Authorization": f"Bearer {api_key}"} if api_key else {}

    def _vendor_headers(self) -> Dict[str, str]:
        """Extra per-vendor headers (OpenRouter attribution, for example)."""
        return {}

    def _build_connection(self, request: StreamRequest, api_key: Optional[str]) -> ConnectionConfig:
        headers = {
            "Content-Type": "application/json",
            "Accept": "text/event-stream",
            **self._auth_headers(api_key),
            **self._vendor_headers(),
            **self._extra_headers,
        }
        body = build_chat_body(request, default_temperature=self._config.get("temperature"))
        return ConnectionConfig(
            url=f"{self._base_url}/chat/completions",
            method="POST",
            headers=headers,
            body=body,
            framing="sse",
            debug_tag=self.DEBUG_TAG,
        )

    def _handle_payload(self, dispatcher: StreamDispatcher, payload: str) -> None:
        if is_done_sentinel(payload):
            self._finish(dispatcher)
            return
        chunk = self._decode_json(dispatcher, payload)
        if chunk is None:
            return
        if chunk.get("error") is not None:
            self._finish(dispatcher, self._error_from_payload(chunk["error"], dispatcher.model))
            return
        if (text := extract_delta_text(chunk)) is not None:
            dispatcher.token(text)
        finish_reason = extract_finish_reason(chunk)
        if finish_reason == CONTENT_FILTER_FINISH_REASON:
            self._finish(
                dispatcher,
                self._error(ErrorCode.CONTENT_BLOCKED, f"response blocked: {finish_reason}", dispatcher.model),
            )
        elif finish_reason:
            normalized_log_event(
                self._logger,
                "stream.finish_reason",
                dispatcher.ctx,
                phase="stream",
                level=logging.DEBUG,
                emitted=dispatcher.metrics.emitted > 0,
                finish_reason=finish_reason,
            )

    async def _probe(self, api_key: Optional[str]) -> CheckResult:
        await self._http_get(f"{self._base_url}/models", headers={**self._auth_headers(api_key), **self._vendor_headers()})
        return CheckResult.success()

    async def fetch_models(self) -> Optional[List[ModelInfo]]:
        """Live ``/models`` listing; the static catalog (or ``None``) on failure."""
        ctx = LogContext(provider=self.provider_name)
        try:
            api_key = await self.get_api_key(None)
            if self.requires_api_key and not api_key:
                return self._static_models()
            response = await self._http_get(
                f"{self._base_url}/models", headers={**self._auth_headers(api_key), **self._vendor_headers()}
            )
            ids = extract_model_ids(response.json())
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
        normalized_log_event(self._logger, "models.fetched", ctx, phase="models", emitted=None, count=len(ids))
        return [ModelInfo(id=model_id, aliases=[model_id]) for model_id in ids]


__all__ = ["OpenAIStyleProvider"]
