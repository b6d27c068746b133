"""GeminiProvider adapter.

Streams ``generateContent`` over Server-Sent Events
(``:streamGenerateContent?alt=sse``) with the shared httpx transport.

Chunk handling, in order, per payload:
    1. decode the JSON object (decode-error policy of ``BaseChatProvider``);
    2. fail on an in-stream ``error`` object;
    3. a new ``responseId`` resets duplicate tracking;
    4. drop the text of a chunk whose ``(responseId, len(first text part))`` was
       already seen; its block and finish reasons still apply;
    5. emit each text part verbatim;
    6. ``promptFeedback.blockReason`` or a blocking ``finishReason`` fails with
       ``CONTENT_BLOCKED``; any other finish reason completes the exchange.

The backend may finish a response without a finish reason; the end of the
HTTP body then completes the exchange.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..base.chat_provider import BaseChatProvider, KeyResolver
from ..base.errors import ErrorCode
from ..base.logging import normalized_log_event
from ..base.models import CheckResult, StreamRequest
from ..base.streaming import ChunkDeduplicator, StreamDispatcher
from ..base.transport import ConnectionConfig, StreamingTransport
from ..config.defaults import GEMINI_DEFAULT_TEMPERATURE, GEMINI_DEFAULT_THINKING_BUDGET
from .stream_helpers import (
    BLOCKING_FINISH_REASONS,
    build_headers,
    build_request_body,
    build_stream_url,
    extract_block_reason,
    extract_finish_reason,
    extract_response_id,
    extract_texts,
)


class GeminiProvider(BaseChatProvider):
    """Gemini streaming chat adapter.

    Args:
        api_key: Explicit API key (otherwise ``GEMINI_API_KEY``/``GOOGLE_API_KEY``
            or the config file).
        base_url: API root, default ``https://generativelanguage.googleapis.com/v1beta``.
        model: Default model for ``chat_stream(None, ...)``.
        online_check: When ``False``, ``check_connection`` only verifies that
            a key is configured.
    """

    PROVIDER = "gemini"
    DEBUG_TAG = "GeminiProvider"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        *,
        key_resolver: Optional[KeyResolver] = None,
        transport: Optional[StreamingTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        online_check: bool = True,
        **config_overrides: Any,
    ) -> None:
        super().__init__(
            api_key,
            base_url,
            model,
            key_resolver=key_resolver,
            transport=transport,
            http_client=http_client,
            **config_overrides,
        )
        self._online_check = online_check
        self._temperature = float(self._config.get("temperature", GEMINI_DEFAULT_TEMPERATURE))
        self._thinking_budget = int(self._config.get("thinking_budget", GEMINI_DEFAULT_THINKING_BUDGET))
        self._dedup = ChunkDeduplicator()

    def _reset_exchange_state(self) -> None:
        super()._reset_exchange_state()
        self._dedup.reset()

    def _build_connection(self, request: StreamRequest, api_key: Optional[str]) -> ConnectionConfig:
        url = build_stream_url(self._base_url, request.model)
        body = build_request_body(
            request,
            default_temperature=self._temperature,
            default_thinking_budget=self._thinking_budget,
        )
        headers = {**build_headers(api_key or ""), **self._extra_headers}
        return ConnectionConfig(url=url, method="POST", headers=headers, body=body, framing="sse", debug_tag=self.DEBUG_TAG)

    def _handle_payload(self, dispatcher: StreamDispatcher, payload: str) -> None:
        chunk = self._decode_json(dispatcher, payload)
        if chunk is None:
            return
        if chunk.get("error") is not None:
            self._finish(dispatcher, self._error_from_payload(chunk["error"], dispatcher.model))
            return

        response_id = extract_response_id(chunk)
        previous_id = self._dedup.response_id
        if self._dedup.observe_identity(response_id):
            dispatcher.ctx.response_id = response_id
            if previous_id is not None:
                normalized_log_event(
                    self._logger,
                    "stream.identity_reset",
                    dispatcher.ctx,
                    phase="stream",
                    emitted=dispatcher.metrics.emitted > 0,
                    previous_response_id=previous_id,
                )

        texts = extract_texts(chunk)
        first_len = len(texts[0]) if texts else 0
        # Chunks without text cannot produce a duplicate token; they are not fingerprinted
        # so a trailing finish/usage chunk is never mistaken for a redelivery.
        duplicate = any(texts) and not self._dedup.register(first_len)
        if duplicate:
            dispatcher.metrics.duplicates_dropped += 1
            normalized_log_event(
                self._logger,
                "stream.duplicate",
                dispatcher.ctx,
                phase="stream",
                level=logging.DEBUG,
                emitted=dispatcher.metrics.emitted > 0,
                fingerprint_length=first_len,
            )
            texts = []

        for text in texts:
            if dispatcher.token(text):
                self._dedup.record_emitted(len(text))
                normalized_log_event(
                    self._logger,
                    "stream.delta",
                    dispatcher.ctx,
                    phase="stream",
                    level=logging.DEBUG,
                    emitted=True,
                    delta_len=len(text),
                    content_length=self._dedup.content_length,
                )

        block_reason = extract_block_reason(chunk)
        finish_reason = extract_finish_reason(chunk)
        if block_reason:
            self._finish(dispatcher, self._error(ErrorCode.CONTENT_BLOCKED, f"prompt blocked: {block_reason}", dispatcher.model))
        elif finish_reason in BLOCKING_FINISH_REASONS:
            self._finish(
                dispatcher, self._error(ErrorCode.CONTENT_BLOCKED, f"response blocked: {finish_reason}", dispatcher.model)
            )
        elif finish_reason:
            self._finish(dispatcher)

    async def _probe(self, api_key: Optional[str]) -> CheckResult:
        if not self._online_check:
            return CheckResult.success()
        await self._http_get(
            f"{self._base_url}/models",
            headers={"x-goog-api-key": api_key or "", **self._extra_headers},
            params={"pageSize": 1},
        )
        return CheckResult.success()


__all__ = ["GeminiProvider"]
