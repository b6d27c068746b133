"""StreamController: async iteration over a callback-driven provider."""
from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from chatwire_providers.base.errors import ErrorCode, ProviderError
from chatwire_providers.base.streaming import StreamController, accumulate_events
from chatwire_providers.gemini import GeminiProvider


class _ScriptedProvider:
    """Delivers a fixed token script on the next loop iterations."""

    provider_name = "scripted"

    def __init__(self, tokens, *, error=None, finish=True):
        self.tokens = list(tokens)
        self.error = error
        self.finish = finish
        self.cancel_calls = 0
        self._active = False

    async def chat_stream(self, model, messages, callbacks=None, options=None):
        self._active = True
        loop = asyncio.get_running_loop()
        for text in self.tokens:
            loop.call_soon(self._emit, callbacks.on_token, text)
        if self.error is not None:
            loop.call_soon(self._emit, callbacks.on_error, self.error)
        elif self.finish:
            loop.call_soon(self._emit, callbacks.on_complete)

    def _emit(self, callback, *args):
        if self._active:
            callback(*args)

    def cancel_stream(self):
        self.cancel_calls += 1
        self._active = False


def _collect(controller):
    async def main():
        return [event async for event in controller]

    return asyncio.run(main())


def test_yields_deltas_then_terminal():
    provider = _ScriptedProvider(["a", "b"])
    controller = StreamController(provider, "m", [{"role": "user", "content": "Hi"}])
    events = _collect(controller)

    assert [e.delta for e in events] == ["a", "b", None]  # nosec B101
    assert events[-1].finish and events[-1].error is None  # nosec B101
    assert controller.finished and controller.error is None  # nosec B101
    assert provider.cancel_calls == 0  # nosec B101


def test_error_becomes_terminal_event():
    err = ProviderError(code=ErrorCode.TIMEOUT, message="slow", provider="scripted")
    controller = StreamController(_ScriptedProvider(["a"], error=err), "m", [])
    events = _collect(controller)

    assert controller.terminal_event is events[-1]  # nosec B101
    assert controller.error is err  # nosec B101
    assert accumulate_events(events).text == "a"  # nosec B101


def test_controller_built_outside_the_loop_binds_on_iteration():
    controller = StreamController(_ScriptedProvider(["x"]), "m", [])

    async def main():
        assert controller._queue is None  # nosec B101
        return [event.delta async for event in controller]

    assert asyncio.run(main()) == ["x", None]  # nosec B101


def test_cancel_before_iteration_never_starts_the_exchange():
    provider = _ScriptedProvider(["a"])
    controller = StreamController(provider, "m", [])
    controller.cancel("not needed")
    events = _collect(controller)

    assert [e.delta for e in events] == [None]  # nosec B101
    assert events[0].error.code is ErrorCode.CANCELLED  # nosec B101
    assert provider._active is False  # nosec B101


def test_cancel_ends_iteration_with_cancelled_terminal():
    provider = _ScriptedProvider(["a", "b", "c"], finish=False)
    controller = StreamController(provider, "m", [])

    async def main():
        seen = []
        async for event in controller:
            seen.append(event)
            if event.delta == "a":
                controller.cancel("user pressed stop")
                controller.cancel("again")
        return seen

    events = asyncio.run(main())

    assert events[-1].finish  # nosec B101
    assert events[-1].error.code is ErrorCode.CANCELLED  # nosec B101
    assert events[-1].error.message == "user pressed stop"  # nosec B101
    assert provider.cancel_calls == 1  # nosec B101


def test_abandoned_iteration_cancels_the_provider():
    provider = _ScriptedProvider(["a", "b"], finish=False)
    controller = StreamController(provider, "m", [])

    async def main():
        agen = controller.__aiter__()
        first = await agen.__anext__()
        await agen.aclose()
        return first

    first = asyncio.run(main())

    assert first.delta == "a"  # nosec B101
    assert provider.cancel_calls == 1  # nosec B101
    assert not controller.finished  # nosec B101


def test_controller_iterates_only_once():
    controller = StreamController(_ScriptedProvider([]), "m", [])
    _collect(controller)
    with pytest.raises(RuntimeError):
        _collect(controller)


def test_controller_over_real_adapter():
    chunks = [
        {"responseId": "r1", "candidates": [{"content": {"parts": [{"text": "Hel"}]}}]},
        {"responseId": "r1", "candidates": [{"content": {"parts": [{"text": "lo"}]}, "finishReason": "STOP"}]},
    ]
    body = "".join(f"data: {json.dumps(c)}\n\n" for c in chunks).encode()

    async def main():
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, content=body)))
        provider = GeminiProvider(api_key="k", http_client=client)  # pragma: allowlist secret - dummy test value
        try:
            controller = StreamController(provider, "gemini-pro", [{"role": "user", "content": "Hi"}])
            return [event async for event in controller]
        finally:
            await provider.destroy()
            await client.aclose()

    events = asyncio.run(main())

    assert accumulate_events(events).text == "Hello"  # nosec B101
    assert events[-1].provider == "gemini" and events[-1].error is None  # nosec B101
