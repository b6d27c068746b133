"""Shared skeleton of every streaming chat adapter.

Purpose:
    Hold everything that does not depend on a vendor's wire format:
    credential resolution, exchange bookkeeping (one exchange at a time,
    silent supersede, cancellation), transport wiring, payload decode-error
    policy, error classification, connection checks and the static model
    catalog fallback.

Subclass hooks:
    - ``_build_connection(request, api_key)``: vendor URL, headers, body, framing.
    - ``_handle_payload(dispatcher, payload)``: one framed payload.
    - ``_probe(api_key)``: optional online connectivity check.
    - ``_reset_exchange_state()``: extend to clear vendor-specific state.

Failure modes:
    - Runtime failures reach callers through ``on_error`` (streaming) or a
      ``CheckResult`` (checks); this class never raises for them.
    - Invalid ``messages``/``options`` raise ``ValueError`` from
      ``chat_stream`` before any state changes.
"""
from __future__ import annotations

import inspect
import itertools
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Union

import httpx

from ..catalog import get_static_models
from ..config import get_provider_config
from ..config.defaults import MAX_CONSECUTIVE_DECODE_ERRORS
from .cancellation import CancelledError
from .constants import LOG_PAYLOAD_PREVIEW_CHARS, MISSING_API_KEY_ERROR
from .errors import ErrorCode, ProviderError, classify_exception, classify_vendor_status
from .errors_parts.classification import _HTTP_STATUS_MAP
from .http import get_async_client
from .interfaces import ChatStreamProvider, HasDefaultModel
from .logging import LogContext, get_logger, normalized_log_event
from .models import CheckResult, Message, ModelInfo, StreamOptions, StreamRequest, coerce_messages
from .repositories import KeysRepository
from .streaming import ExchangeState, StreamCallbacks, StreamDispatcher
from .timeouts import build_httpx_timeout
from .transport import ConnectionConfig, ConnectionHandlers, StreamingTransport, TransportHTTPError

KeyResolver = Callable[[Optional[str]], Union[Optional[str], Awaitable[Optional[str]]]]


class BaseChatProvider(ChatStreamProvider, HasDefaultModel):
    """Vendor-independent part of a streaming chat adapter.

    Parameters:
        api_key: Explicit credential; wins over every stored source.
        base_url: Overrides the configured endpoint root.
        model: Overrides the configured default model.
        key_resolver: ``callable(model) -> key | None`` (sync or async). Defaults
            to :class:`KeysRepository`.
        transport: Injected :class:`StreamingTransport` (tests).
        http_client: ``httpx.AsyncClient`` used for streaming and probes.
        **config_overrides: Merged last into ``get_provider_config`` (for
            example ``temperature`` or ``headers``, extra request headers).
    """

    PROVIDER: str = ""
    DEBUG_TAG: str = "ChatProvider"
    requires_api_key: bool = True

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        *,
        key_resolver: Optional[KeyResolver] = None,
        transport: Optional[StreamingTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        **config_overrides: Any,
    ) -> None:
        self._config: Dict[str, Any] = get_provider_config(
            self.PROVIDER, overrides={"base_url": base_url, "model": model, **config_overrides}
        )
        self._base_url = str(self._config.get("base_url") or self._config.get("host") or "").rstrip("/")
        self._model: Optional[str] = self._config.get("model")
        self._extra_headers: Dict[str, str] = {str(k): str(v) for k, v in (self._config.get("headers") or {}).items()}
        if api_key and api_key.strip():
            explicit = api_key.strip()
            self._key_resolver: KeyResolver = lambda _model: explicit
        else:
            self._key_resolver = key_resolver or KeysRepository().resolver_for(self.PROVIDER)
        self._http_client = http_client
        self._transport = transport or StreamingTransport(self.DEBUG_TAG, client=http_client)
        self._logger = get_logger(f"providers.{self.PROVIDER}")
        self._dispatcher: Optional[StreamDispatcher] = None
        self._exchange_ids = itertools.count(1)
        self._decode_failures = 0
        self._consecutive_decode_failures = 0

    # ------------------------------------------------------------------ identity
    @property
    def provider_name(self) -> str:
        return self.PROVIDER

    def default_model(self) -> Optional[str]:
        return self._model

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def state(self) -> ExchangeState:
        """State of the current (or last) exchange."""
        return self._dispatcher.state if self._dispatcher is not None else ExchangeState.IDLE

    # --------------------------------------------------------------- credentials
    async def get_api_key(self, model: Optional[str] = None) -> Optional[str]:
        """Resolve the credential for ``model``; blank values count as missing."""
        value = self._key_resolver(model)
        if inspect.isawaitable(value):
            value = await value
        if not isinstance(value, str):
            return None
        return value.strip() or None

    # ---------------------------------------------------------------- exchanges
    async def chat_stream(
        self,
        model: Optional[str],
        messages: Iterable[Union[Message, Mapping[str, Any]]],
        callbacks: Optional[StreamCallbacks] = None,
        options: Union[StreamOptions, Mapping[str, Any], None] = None,
    ) -> None:
        """Start one streaming exchange and return once the connection is scheduled.

        Tokens, completion and errors arrive through ``callbacks``. A running
        exchange of this adapter is cancelled silently first.
        """
        model = model or self._model
        if not model:
            raise ValueError(f"{self.PROVIDER}: no model given and no default configured")
        request = StreamRequest(model=model, messages=coerce_messages(messages), options=StreamOptions.coerce(options))

        self._abandon_exchange()
        ctx = LogContext(provider=self.provider_name, model=model, exchange_id=next(self._exchange_ids))
        dispatcher = StreamDispatcher(callbacks, provider=self.provider_name, model=model, logger=self._logger, ctx=ctx)
        self._dispatcher = dispatcher
        normalized_log_event(
            self._logger,
            "stream.start",
            ctx,
            phase="start",
            attempt=1,
            emitted=False,
            message_count=len(request.messages),
        )

        api_key: Optional[str] = None
        if self.requires_api_key:
            try:
                api_key = await self.get_api_key(model)
            except Exception as exc:  # resolver failure is reported like any other
                dispatcher.fail(self._error_from_exception(exc, model))
                return
            if dispatcher.finished:
                # cancelled or superseded while the key was being resolved
                return
            if not api_key:
                dispatcher.fail(
                    ProviderError(
                        code=ErrorCode.NO_CREDENTIAL,
                        message=MISSING_API_KEY_ERROR,
                        provider=self.provider_name,
                        model=model,
                    )
                )
                return

        self._reset_exchange_state()
        config = self._build_connection(request, api_key)
        handlers = ConnectionHandlers(
            on_start=dispatcher.start,
            on_data=lambda payload: self._on_payload(dispatcher, payload),
            on_error=lambda exc: self._on_transport_error(dispatcher, exc),
            on_end=lambda: self._on_transport_end(dispatcher),
        )
        self._transport.start_connection(config, handlers)

    def cancel_stream(self) -> None:
        """Stop the active exchange silently. No-op when nothing is running."""
        dispatcher = self._dispatcher
        if dispatcher is not None:
            dispatcher.cancel()
        self._transport.stop_connection("cancelled by caller")

    async def wait(self) -> None:
        """Wait until the current connection has fully unwound."""
        await self._transport.wait()

    async def destroy(self) -> None:
        self.cancel_stream()
        await self._transport.destroy()
        self._dispatcher = None
        self._reset_exchange_state()

    def _abandon_exchange(self) -> None:
        previous = self._dispatcher
        if previous is not None:
            previous.cancel()
        self._transport.stop_connection("superseded by a new exchange")

    def _reset_exchange_state(self) -> None:
        self._decode_failures = 0
        self._consecutive_decode_failures = 0

    # ------------------------------------------------------------ vendor hooks
    def _build_connection(self, request: StreamRequest, api_key: Optional[str]) -> ConnectionConfig:
        raise NotImplementedError

    def _handle_payload(self, dispatcher: StreamDispatcher, payload: str) -> None:
        raise NotImplementedError

    async def _probe(self, api_key: Optional[str]) -> CheckResult:
        return CheckResult.success()

    # --------------------------------------------------------- transport events
    def _on_payload(self, dispatcher: StreamDispatcher, payload: str) -> None:
        if dispatcher.finished:
            return
        self._handle_payload(dispatcher, payload)

    def _on_transport_error(self, dispatcher: StreamDispatcher, exc: BaseException) -> None:
        if isinstance(exc, CancelledError):
            dispatcher.cancel()
            return
        if dispatcher.finished:
            return
        dispatcher.fail(self._error_from_exception(exc, dispatcher.model))

    def _on_transport_end(self, dispatcher: StreamDispatcher) -> None:
        if dispatcher.finished:
            return
        if self._decode_failures and dispatcher.metrics.emitted == 0:
            dispatcher.fail(
                self._error(
                    ErrorCode.MALFORMED_RESPONSE,
                    "stream ended with undecodable payloads and no text",
                    dispatcher.model,
                )
            )
            return
        dispatcher.complete()

    def _finish(self, dispatcher: StreamDispatcher, error: Optional[ProviderError] = None) -> None:
        """Terminal state decided by a payload: notify, then drop the rest of the stream."""
        done = dispatcher.complete() if error is None else dispatcher.fail(error)
        if done and self._dispatcher is dispatcher:
            self._transport.stop_connection("exchange finished")

    # --------------------------------------------------------------- decoding
    def _decode_json(self, dispatcher: StreamDispatcher, payload: str) -> Optional[Dict[str, Any]]:
        """Parse one payload as a JSON object, applying the decode-error policy.

        Returns ``None`` for undecodable payloads. After
        ``MAX_CONSECUTIVE_DECODE_ERRORS`` in a row the exchange fails with
        ``MALFORMED_RESPONSE``.
        """
        text = payload.strip()
        if text.startswith("data:"):
            text = text[len("data:"):].strip()
        try:
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        except ValueError as exc:
            self._record_decode_error(dispatcher, payload, exc)
            return None
        self._consecutive_decode_failures = 0
        return data

    def _record_decode_error(self, dispatcher: StreamDispatcher, payload: str, exc: Exception) -> None:
        self._decode_failures += 1
        self._consecutive_decode_failures += 1
        dispatcher.metrics.decode_errors += 1
        normalized_log_event(
            self._logger,
            "stream.decode_error",
            dispatcher.ctx,
            phase="parse",
            level=logging.WARNING,
            error_code=ErrorCode.MALFORMED_RESPONSE.value,
            emitted=dispatcher.metrics.emitted > 0,
            consecutive=self._consecutive_decode_failures,
            preview=payload[:LOG_PAYLOAD_PREVIEW_CHARS],
            error=str(exc),
        )
        if self._consecutive_decode_failures >= MAX_CONSECUTIVE_DECODE_ERRORS:
            self._finish(
                dispatcher,
                self._error(
                    ErrorCode.MALFORMED_RESPONSE,
                    f"{self._consecutive_decode_failures} consecutive undecodable stream payloads",
                    dispatcher.model,
                    raw=exc,
                ),
            )

    # --------------------------------------------------------- classification
    def _error(
        self,
        code: ErrorCode,
        message: str,
        model: Optional[str],
        *,
        status_code: Optional[int] = None,
        raw: Optional[BaseException] = None,
    ) -> ProviderError:
        return ProviderError(
            code=code, message=message, provider=self.provider_name, model=model, status_code=status_code, raw=raw
        )

    def _error_from_payload(self, error: Any, model: Optional[str]) -> ProviderError:
        """Classify a vendor error object (``{"code", "message", "status"|"type"}``) or string."""
        if not isinstance(error, Mapping):
            message = str(error) or "stream error"
            return self._error(classify_vendor_status(message), message, model)
        message = str(error.get("message") or error.get("type") or error.get("status") or "stream error")
        status_code = error.get("code") if isinstance(error.get("code"), int) else None
        code = _HTTP_STATUS_MAP.get(status_code) if status_code is not None else None
        if code is None:
            code = classify_vendor_status(error.get("status") or error.get("type"))
        if code is ErrorCode.UNKNOWN:
            code = classify_vendor_status(message)
        return self._error(code, message, model, status_code=status_code)

    def _error_from_exception(self, exc: BaseException, model: Optional[str]) -> ProviderError:
        if isinstance(exc, ProviderError):
            return exc
        code = classify_exception(exc)
        if isinstance(exc, TransportHTTPError):
            detail: Optional[ProviderError] = None
            try:
                body = json.loads(exc.body) if exc.body else None
            except ValueError:
                body = None
            if isinstance(body, Mapping) and body.get("error") is not None:
                detail = self._error_from_payload(body["error"], model)
            message = f"HTTP {exc.status_code}: {detail.message}" if detail else str(exc)
            if code is ErrorCode.UNKNOWN and detail is not None:
                code = detail.code
            return self._error(code, message, model, status_code=exc.status_code, raw=exc)
        return self._error(code, str(exc) or type(exc).__name__, model, status_code=getattr(exc, "status_code", None), raw=exc)

    # ------------------------------------------------------------------ checks
    async def check_connection(self) -> CheckResult:
        """Report usability: ``NO_KEY`` without a network call when no key resolves."""
        ctx = LogContext(provider=self.provider_name)
        api_key: Optional[str] = None
        try:
            if self.requires_api_key:
                api_key = await self.get_api_key(None)
                if not api_key:
                    normalized_log_event(self._logger, "check.no_key", ctx, phase="check", emitted=None)
                    return CheckResult.no_key()
            result = await self._probe(api_key)
        except Exception as exc:  # every failure becomes a CheckResult
            result = CheckResult.from_error(exc)
        normalized_log_event(
            self._logger,
            "check.end",
            ctx,
            phase="check",
            emitted=None,
            ok=result.ok,
            reason=result.reason.value if result.reason else None,
        )
        return result

    def _probe_client(self) -> httpx.AsyncClient:
        return self._http_client or get_async_client(None, f"{self.PROVIDER}.probe")

    async def _http_get(self, url: str, *, headers: Optional[Mapping[str, str]] = None, params: Any = None) -> httpx.Response:
        """Non-streaming GET used by probes and model listing; raises on non-2xx."""
        response = await self._probe_client().get(
            url, headers=dict(headers or {}), params=params, timeout=build_httpx_timeout(streaming=False)
        )
        if not response.is_success:
            raise TransportHTTPError(response.status_code, response.text, url)
        return response

    # ------------------------------------------------------------------ models
    def _static_models(self) -> Optional[List[ModelInfo]]:
        entries = get_static_models(self.provider_name)
        if entries is None:
            return None
        return [ModelInfo.from_catalog_entry(e) for e in entries]

    async def fetch_models(self) -> Optional[List[ModelInfo]]:
        """Static catalog entries for this provider, or ``None``."""
        models = self._static_models()
        normalized_log_event(
            self._logger,
            "models.static",
            LogContext(provider=self.provider_name),
            phase="models",
            emitted=None,
            count=len(models) if models is not None else None,
        )
        return models


__all__ = ["BaseChatProvider", "KeyResolver"]
