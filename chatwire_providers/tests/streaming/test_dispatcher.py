"""StreamDispatcher: state machine and guarded callback delivery."""
from __future__ import annotations

import json

from chatwire_providers.base.errors import ErrorCode, ProviderError
from chatwire_providers.base.logging import REQUIRED_NORMALIZED_KEYS, get_logger
from chatwire_providers.base.streaming import ExchangeState, StreamCallbacks, StreamDispatcher
from chatwire_providers.tests.helpers import CallbackRecorder


def _dispatcher(rec: CallbackRecorder) -> StreamDispatcher:
    return StreamDispatcher(rec.callbacks(), provider="fake", model="m", logger=get_logger("providers.fake"))


def _error(code: ErrorCode = ErrorCode.NETWORK) -> ProviderError:
    return ProviderError(code=code, message="boom", provider="fake", model="m")


def test_lifecycle_to_completion():
    rec = CallbackRecorder()
    d = _dispatcher(rec)
    assert d.state is ExchangeState.CONNECTING  # nosec B101
    d.start()
    assert d.state is ExchangeState.STREAMING  # nosec B101
    assert d.token("a") and d.token("b")  # nosec B101
    assert d.complete() is True  # nosec B101

    assert rec.events == [("start", None), ("token", "a"), ("token", "b"), ("complete", None)]  # nosec B101
    assert d.metrics.emitted == 2 and d.metrics.emitted_chars == 2  # nosec B101
    assert d.metrics.time_to_first_token_ms is not None  # nosec B101
    assert d.metrics.total_duration_ms is not None  # nosec B101


def test_only_first_terminal_fires_and_tokens_stop():
    rec = CallbackRecorder()
    d = _dispatcher(rec)
    d.start()
    assert d.fail(_error()) is True  # nosec B101
    assert d.complete() is False  # nosec B101
    assert d.fail(_error(ErrorCode.AUTH)) is False  # nosec B101
    assert d.token("late") is False  # nosec B101

    assert [k for k, _ in rec.events] == ["start", "error"]  # nosec B101
    assert d.error.code is ErrorCode.NETWORK  # nosec B101
    assert d.state is ExchangeState.FAILED  # nosec B101


def test_cancel_is_silent_and_final():
    rec = CallbackRecorder()
    d = _dispatcher(rec)
    d.start()
    d.token("x")
    assert d.cancel() is True  # nosec B101
    assert d.cancel() is False  # nosec B101
    assert d.complete() is False  # nosec B101
    assert d.token("y") is False  # nosec B101

    assert rec.events == [("start", None), ("token", "x")]  # nosec B101
    assert d.state is ExchangeState.CANCELLED  # nosec B101


def test_first_token_implies_start_and_empty_text_is_ignored():
    rec = CallbackRecorder()
    d = _dispatcher(rec)
    assert d.token("") is False  # nosec B101
    d.token("hi")
    d.start()

    assert rec.events == [("start", None), ("token", "hi")]  # nosec B101


def test_callback_exceptions_are_logged_not_raised(log_records):
    def explode(*_args):
        raise ValueError("caller bug")

    d = StreamDispatcher(
        StreamCallbacks(on_start=explode, on_token=explode, on_complete=explode),
        provider="fake",
        model="m",
        logger=get_logger("providers.fake"),
    )
    d.start()
    d.token("a")
    d.complete()

    events = [json.loads(r.getMessage()) for r in log_records]
    errors = [e for e in events if e["event"] == "stream.callback_error"]
    assert [e["callback"] for e in errors] == ["on_start", "on_token", "on_complete"]  # nosec B101
    assert d.state is ExchangeState.COMPLETE  # nosec B101


def test_finalize_event_has_normalized_keys(log_records):
    d = _dispatcher(CallbackRecorder())
    d.token("abc")
    d.fail(_error(ErrorCode.CONTENT_BLOCKED))

    payloads = [json.loads(r.getMessage()) for r in log_records]
    final = next(p for p in payloads if p["event"] == "stream.adapter.error")
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in final  # nosec B101
    assert final["error_code"] == "content_blocked"  # nosec B101
    assert final["emitted_count"] == 1  # nosec B101
    assert final["provider"] == "fake"  # nosec B101
