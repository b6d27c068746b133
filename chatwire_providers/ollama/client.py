"""OllamaProvider adapter.

Streams ``POST {host}/api/chat`` from a local Ollama daemon. The body is
newline-delimited JSON, so the connection uses ``lines`` framing. No API key
is involved: ``check_connection`` only reports network problems and
``fetch_models`` lists the installed models from ``/api/tags``.
"""

from __future__ import annotations

import logging
from typing import Optional, List

from ..base.chat_provider import BaseChatProvider
from ..base.logging import LogContext, normalized_log_event
from ..base.models import CheckResult, ModelInfo, StreamRequest
from ..base.streaming import StreamDispatcher
from ..base.transport import ConnectionConfig
from .helpers import build_chat_payload, extract_content, extract_model_names, is_done


class OllamaProvider(BaseChatProvider):
    """Local Ollama streaming chat adapter.

    ``base_url`` (or the ``host`` config key / ``OLLAMA_HOST``) points at the
    daemon, default ``http://localhost:11434``.
    """

    PROVIDER = "ollama"
    DEBUG_TAG = "OllamaProvider"
    requires_api_key = False

    def _build_connection(self, request: StreamRequest, api_key: Optional[str]) -> ConnectionConfig:
        return ConnectionConfig(
            url=f"{self._base_url}/api/chat",
            method="POST",
            headers={"Content-Type": "application/json", **self._extra_headers},
            body=build_chat_payload(request, default_temperature=self._config.get("temperature")),
            framing="lines",
            debug_tag=self.DEBUG_TAG,
        )

    def _handle_payload(self, dispatcher: StreamDispatcher, payload: str) -> None:
        chunk = self._decode_json(dispatcher, payload)
        if chunk is None:
            return
        if chunk.get("error"):
            self._finish(dispatcher, self._error_from_payload(chunk["error"], dispatcher.model))
            return
        if (text := extract_content(chunk)) is not None:
            dispatcher.token(text)
        if is_done(chunk):
            self._finish(dispatcher)

    async def _probe(self, api_key: Optional[str]) -> CheckResult:
        await self._http_get(f"{self._base_url}/api/tags", headers=self._extra_headers)
        return CheckResult.success()

    async def fetch_models(self) -> Optional[List[ModelInfo]]:
        """Installed models; ``None`` when the daemon cannot be reached."""
        ctx = LogContext(provider=self.provider_name)
        try:
            response = await self._http_get(f"{self._base_url}/api/tags", headers=self._extra_headers)
            names = extract_model_names(response.json())
        except Exception as exc:  # daemon down: no catalog to offer
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
            return None
        normalized_log_event(self._logger, "models.fetched", ctx, phase="models", emitted=None, count=len(names))
        return [ModelInfo(id=name, aliases=[name]) for name in names]


__all__ = ["OllamaProvider"]
