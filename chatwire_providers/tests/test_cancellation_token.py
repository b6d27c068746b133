from __future__ import annotations

import threading

import pytest

from chatwire_providers.base.cancellation import CancellationToken, CancelledError


def test_cancel_is_one_shot_and_runs_callbacks_once():
    token = CancellationToken()
    calls = []
    token.on_cancel(calls.append)

    assert token.cancel("stop") is True  # nosec B101
    assert token.cancel("again") is False  # nosec B101
    assert calls == ["stop"]  # nosec B101
    assert token.cancelled and token.reason == "stop"  # nosec B101


def test_late_registration_runs_immediately():
    token = CancellationToken()
    token.cancel()
    calls = []
    token.on_cancel(lambda reason: calls.append(reason))

    assert calls == [None]  # nosec B101


def test_raise_if_cancelled():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel("user")
    with pytest.raises(CancelledError, match="user"):
        token.raise_if_cancelled()


def test_cancel_from_many_threads_fires_once():
    token = CancellationToken()
    calls = []
    token.on_cancel(calls.append)
    results = []
    threads = [threading.Thread(target=lambda i=i: results.append(token.cancel(str(i)))) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1  # nosec B101
    assert len(calls) == 1  # nosec B101
