"""StreamController: async iterator facade over a callback-driven provider.

Lets callers write::

    controller = StreamController(provider, "gemini-2.5-flash", messages)
    async for event in controller:
        print(event.delta or "", end="")

instead of wiring :class:`StreamCallbacks` by hand. Each controller drives one
exchange.
"""
from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Iterable, List, Mapping, Optional, Union

from ..errors import ErrorCode, ProviderError
from ..models import Message, StreamOptions
from .callbacks import StreamCallbacks
from .streaming import ChatStreamEvent


class StreamController:
    """Cancellable async iterator of :class:`ChatStreamEvent`.

    Responsibilities:
      * Translate callbacks into queued events.
      * Expose ``cancel(reason)``; the iterator then ends with a terminal event
        whose error code is ``CANCELLED``.
      * Track the terminal event for post-hoc inspection.
    """

    def __init__(
        self,
        provider: Any,
        model: str,
        messages: Iterable[Union[Message, Mapping[str, Any]]],
        options: Union[StreamOptions, Mapping[str, Any], None] = None,
    ) -> None:
        self._provider = provider
        self._model = model
        self._messages = list(messages)
        self._options = options
        # Created on first iteration so it binds to the loop that consumes it.
        self._queue: Optional["asyncio.Queue[ChatStreamEvent]"] = None
        self._pending: List[ChatStreamEvent] = []
        self._started = False
        self._closed = False
        self._finished = False
        self._terminal_event: ChatStreamEvent | None = None

    def _provider_name(self) -> str:
        return getattr(self._provider, "provider_name", "unknown")

    def _event(self, delta: Optional[str], *, finish: bool = False, error: ProviderError | None = None) -> ChatStreamEvent:
        return ChatStreamEvent(provider=self._provider_name(), model=self._model, delta=delta, finish=finish, error=error)

    def _put(self, evt: ChatStreamEvent) -> None:
        if self._queue is None:
            self._pending.append(evt)
        else:
            self._queue.put_nowait(evt)

    def _push_terminal(self, error: ProviderError | None = None) -> None:
        if self._closed:
            return
        self._closed = True
        self._put(self._event(None, finish=True, error=error))

    def _callbacks(self) -> StreamCallbacks:
        def on_token(text: str) -> None:
            if not self._closed:
                self._put(self._event(text))

        return StreamCallbacks(
            on_token=on_token,
            on_complete=lambda: self._push_terminal(),
            on_error=lambda err: self._push_terminal(err),
        )

    def __aiter__(self) -> AsyncIterator[ChatStreamEvent]:
        return self._events()

    async def _events(self) -> AsyncIterator[ChatStreamEvent]:
        if self._started:
            raise RuntimeError("StreamController can only be iterated once")
        self._started = True
        queue: "asyncio.Queue[ChatStreamEvent]" = asyncio.Queue()
        self._queue = queue
        for evt in self._pending:
            queue.put_nowait(evt)
        self._pending.clear()
        try:
            if not self._closed:
                await self._provider.chat_stream(self._model, self._messages, self._callbacks(), self._options)
            while True:
                evt = await queue.get()
                if evt.finish:
                    self._finished = True
                    self._terminal_event = evt
                    yield evt
                    return
                yield evt
        finally:
            if not self._finished:
                self._provider.cancel_stream()

    # API -----------------------------------------------------------------
    def cancel(self, reason: str | None = None) -> None:
        """Cancel the underlying exchange. Safe to invoke repeatedly or after completion."""
        if self._closed:
            return
        self._provider.cancel_stream()
        self._push_terminal(
            ProviderError(
                code=ErrorCode.CANCELLED,
                message=reason or "stream cancelled",
                provider=self._provider_name(),
                model=self._model,
            )
        )

    @property
    def finished(self) -> bool:  # noqa: D401 - short property
        """Whether the terminal event has been yielded."""
        return self._finished

    @property
    def terminal_event(self) -> ChatStreamEvent | None:  # noqa: D401 - short property
        """The captured terminal event, once iteration completed."""
        return self._terminal_event

    @property
    def error(self) -> ProviderError | None:  # noqa: D401 - short property
        """Error of the terminal event (if any)."""
        return self._terminal_event.error if self._terminal_event else None


__all__ = ["StreamController"]
