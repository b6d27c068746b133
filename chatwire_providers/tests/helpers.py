"""Test doubles shared by the adapter tests.

``StubTransport`` stands in for :class:`StreamingTransport`: it records every
connection an adapter starts and lets the test replay transport events
(start, payloads, end, error) synchronously. ``CallbackRecorder`` collects the
caller-side callbacks of an exchange in order. ``StalledBody`` is a response
body for ``httpx.MockTransport`` that sends its first chunk and then stalls.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import AsyncIterator, Iterable, List, Optional, Tuple

import httpx

from chatwire_providers.base.cancellation import CancelledError
from chatwire_providers.base.errors import ProviderError
from chatwire_providers.base.streaming import StreamCallbacks
from chatwire_providers.base.transport import ConnectionConfig, ConnectionHandlers


@dataclass
class StubConnection:
    config: ConnectionConfig
    handlers: ConnectionHandlers
    stopped: bool = False
    closed: bool = False

    def start(self) -> None:
        if self.handlers.on_start is not None:
            self.handlers.on_start()

    def feed(self, *payloads: str) -> None:
        """Deliver payloads in order, as long as the adapter has not stopped the connection."""
        for payload in payloads:
            if self.stopped or self.closed:
                return
            self.handlers.on_data(payload)

    def end(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.stopped:
            self.handlers.on_error(CancelledError("connection stopped"))
        else:
            self.handlers.on_end()

    def fail(self, exc: BaseException) -> None:
        if self.closed:
            return
        self.closed = True
        self.handlers.on_error(exc)

    def replay(self, payloads: Iterable[str]) -> None:
        """Start, deliver every payload and close the connection."""
        self.start()
        self.feed(*payloads)
        self.end()


class StubTransport:
    """Records ``start_connection`` calls instead of opening HTTP requests."""

    def __init__(self) -> None:
        self.connections: List[StubConnection] = []
        self.stop_reasons: List[str] = []
        self.destroyed = False

    @property
    def last(self) -> StubConnection:
        return self.connections[-1]

    def start_connection(self, config: ConnectionConfig, handlers: ConnectionHandlers) -> StubConnection:
        self.stop_connection("superseded")
        connection = StubConnection(config, handlers)
        self.connections.append(connection)
        return connection

    def stop_connection(self, reason: str = "connection stopped") -> None:
        if self.connections and not self.last.stopped and not self.last.closed:
            self.last.stopped = True
            self.stop_reasons.append(reason)

    async def wait(self) -> None:
        return None

    async def destroy(self) -> None:
        self.stop_connection("transport destroyed")
        self.destroyed = True


@dataclass
class CallbackRecorder:
    """Collects callback invocations as ``(kind, value)`` tuples."""

    events: List[Tuple[str, object]] = field(default_factory=list)

    def callbacks(self) -> StreamCallbacks:
        return StreamCallbacks(
            on_start=lambda: self.events.append(("start", None)),
            on_token=lambda text: self.events.append(("token", text)),
            on_complete=lambda: self.events.append(("complete", None)),
            on_error=lambda err: self.events.append(("error", err)),
        )

    @property
    def tokens(self) -> List[str]:
        return [str(v) for k, v in self.events if k == "token"]

    @property
    def text(self) -> str:
        return "".join(self.tokens)

    @property
    def terminals(self) -> List[Tuple[str, object]]:
        return [(k, v) for k, v in self.events if k in ("complete", "error")]

    @property
    def error(self) -> Optional[ProviderError]:
        errors = [v for k, v in self.events if k == "error"]
        return errors[0] if errors else None  # type: ignore[return-value]


class StalledBody(httpx.AsyncByteStream):
    """Yields ``first``, then waits ``stall`` seconds before ``rest``."""

    def __init__(self, first: bytes, rest: bytes = b"", stall: float = 5.0) -> None:
        self.first = first
        self.rest = rest
        self.stall = stall

    async def __aiter__(self) -> AsyncIterator[bytes]:
        yield self.first
        await asyncio.sleep(self.stall)
        yield self.rest


__all__ = ["CallbackRecorder", "StalledBody", "StubConnection", "StubTransport"]
