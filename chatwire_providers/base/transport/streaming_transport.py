"""Streaming HTTP transport.

Purpose:
    Open one long-lived HTTP request, split the response body into payloads
    (SSE events, JSON lines or raw text) and deliver them to the owning
    adapter through :class:`ConnectionHandlers`.

External dependencies:
    - ``httpx.AsyncClient`` streaming (``client.send(request, stream=True)``).

Concurrency:
    - Each connection runs as an asyncio task created by
      :meth:`StreamingTransport.start_connection`, which therefore requires a
      running event loop.
    - A transport owns at most one active connection; starting a new one
      stops the previous one first.

Failure modes:
    - Non-2xx responses raise :class:`TransportHTTPError` (status and a
      truncated body) delivered through ``on_error``.
    - httpx transport exceptions and timeouts are delivered through ``on_error``
      unchanged; classification is the adapter's job.
    - Stopping a connection delivers a :class:`CancelledError` through
      ``on_error`` unless a terminal callback already fired.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
from typing import AsyncIterator, Optional
from urllib.parse import urlsplit, urlunsplit

import httpx

from ..cancellation import CancelledError
from ..log_support import LogContext
from ..logging import get_logger, log_event
from ..timeouts import build_httpx_timeout
from .connection import ConnectionConfig, ConnectionHandlers
from .errors import TransportHTTPError
from .framing import iter_nonempty_lines, iter_raw_chunks, iter_sse_data
from .handle import ConnectionHandle


def _redact_url(url: str) -> str:
    """Drop the query string (it may carry credentials) for logging."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class _HandlerGuard:
    """Enforces the handler contract: at most one terminal callback, nothing after it."""

    def __init__(self, handlers: ConnectionHandlers, handle: ConnectionHandle) -> None:
        self._handlers = handlers
        self._handle = handle
        self.closed = False

    def start(self) -> None:
        if not self.closed and self._handlers.on_start is not None:
            self._handlers.on_start()

    def data(self, payload: str) -> None:
        if not self.closed and self._handlers.on_data is not None:
            self._handlers.on_data(payload)

    def error(self, exc: BaseException) -> None:
        if self.closed:
            return
        self.closed = True
        if self._handlers.on_error is not None:
            self._handlers.on_error(exc)

    def end(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._handlers.on_end is not None:
            self._handlers.on_end()


class StreamingTransport:
    """Owns a single long-lived streaming HTTP connection at a time.

    Parameters:
        debug_tag: Default label for log events (e.g. ``"GeminiProvider"``).
        client: Optional ``httpx.AsyncClient`` to borrow. When omitted the
            transport creates its own client lazily and closes it in
            :meth:`destroy`.
    """

    def __init__(
        self,
        debug_tag: str = "transport",
        *,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._debug_tag = debug_tag
        self._client = client
        self._owns_client = client is None
        self._active: Optional[ConnectionHandle] = None
        self._ids = itertools.count(1)
        self._logger = logger or get_logger("transport")

    @property
    def active(self) -> Optional[ConnectionHandle]:
        """The current connection handle, if one is open."""
        return self._active

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=build_httpx_timeout())
            self._owns_client = True
        return self._client

    def start_connection(self, config: ConnectionConfig, handlers: ConnectionHandlers) -> ConnectionHandle:
        """Open a streaming request in a background task and return its handle.

        Any previously active connection is stopped first.

        Raises:
            RuntimeError: when no event loop is running.
        """
        loop = asyncio.get_running_loop()
        self.stop_connection()
        handle = ConnectionHandle(next(self._ids), config.debug_tag or self._debug_tag)
        task = loop.create_task(self._run(handle, config, handlers), name=f"chatwire-{handle.tag}-{handle.id}")
        handle.attach(task, loop)
        self._active = handle
        task.add_done_callback(lambda _t, h=handle: self._release(h))
        return handle

    def _release(self, handle: ConnectionHandle) -> None:
        if self._active is handle:
            self._active = None

    def stop_connection(self, reason: str = "connection stopped") -> None:
        """Stop the active connection, if any. Idempotent; safe from any thread."""
        handle = self._active
        if handle is None:
            return
        if handle.cancel(reason):
            log_event(self._logger, "transport.stop", LogContext(extra={"tag": handle.tag}), level=logging.DEBUG, connection_id=handle.id)

    async def wait(self) -> None:
        """Wait for the active connection (if any) to finish."""
        handle = self._active
        if handle is not None:
            await handle.wait()

    async def destroy(self) -> None:
        """Stop the active connection, wait for it to unwind and close an owned client."""
        handle = self._active
        self.stop_connection("transport destroyed")
        if handle is not None:
            await handle.wait()
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_request(self, client: httpx.AsyncClient, config: ConnectionConfig) -> httpx.Request:
        kwargs = {}
        if isinstance(config.body, (str, bytes)):
            kwargs["content"] = config.body
        elif config.body is not None:
            kwargs["json"] = config.body
        return client.build_request(
            config.method,
            config.url,
            headers=config.headers,
            timeout=config.timeout or build_httpx_timeout(),
            **kwargs,
        )

    @staticmethod
    def _frame(response: httpx.Response, config: ConnectionConfig) -> AsyncIterator[str]:
        if config.framing == "sse":
            return iter_sse_data(response.aiter_lines())
        if config.framing == "lines":
            return iter_nonempty_lines(response.aiter_lines())
        return iter_raw_chunks(response.aiter_text())

    async def _run(self, handle: ConnectionHandle, config: ConnectionConfig, handlers: ConnectionHandlers) -> None:
        guard = _HandlerGuard(handlers, handle)
        ctx = LogContext(extra={"tag": handle.tag})
        url = _redact_url(config.url)
        log_event(self._logger, "transport.start", ctx, level=logging.DEBUG, connection_id=handle.id, url=url, framing=config.framing)
        payloads = 0
        try:
            client = self._ensure_client()
            response = await client.send(self._build_request(client, config), stream=True)
            try:
                if not response.is_success:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise TransportHTTPError(response.status_code, body, url)
                handle.token.raise_if_cancelled()
                log_event(self._logger, "transport.connected", ctx, level=logging.DEBUG, connection_id=handle.id, status=response.status_code)
                guard.start()
                async for payload in self._frame(response, config):
                    handle.token.raise_if_cancelled()
                    payloads += 1
                    guard.data(payload)
                    # A stop issued from a handler runs inside this task; leave the read loop now.
                    if guard.closed or handle.cancelled:
                        break
                handle.token.raise_if_cancelled()
            finally:
                await response.aclose()
        except asyncio.CancelledError:
            guard.error(CancelledError(handle.token.reason or "connection cancelled"))
            log_event(self._logger, "transport.cancelled", ctx, level=logging.DEBUG, connection_id=handle.id, payloads=payloads)
            if not handle.cancelled:
                # Cancelled from outside (loop shutdown): propagate.
                raise
            return
        except CancelledError as exc:
            guard.error(exc)
            log_event(self._logger, "transport.cancelled", ctx, level=logging.DEBUG, connection_id=handle.id, payloads=payloads)
            return
        except Exception as exc:  # delivered to the adapter for classification
            log_event(
                self._logger,
                "transport.error",
                ctx,
                level=logging.WARNING,
                connection_id=handle.id,
                error_type=type(exc).__name__,
                status=getattr(exc, "status_code", None),
                message=str(exc)[:200],
            )
            guard.error(exc)
            return
        log_event(self._logger, "transport.end", ctx, level=logging.DEBUG, connection_id=handle.id, payloads=payloads)
        guard.end()


__all__ = ["StreamingTransport"]
