"""Caller-facing side of one exchange.

:class:`StreamDispatcher` owns the exchange state machine and is the only
object that invokes the caller's :class:`StreamCallbacks`. It guarantees:

* at most one terminal callback (``on_complete`` or ``on_error``);
* no ``on_token`` after a terminal state or after cancellation;
* exceptions raised by caller callbacks are logged, never propagated into
  the transport read loop.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from ..errors import ErrorCode, ProviderError
from ..logging import LogContext, normalized_log_event
from .callbacks import StreamCallbacks
from .exchange_state import ExchangeState
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics


class StreamDispatcher:
    """Exchange state plus guarded delivery to the caller's callbacks."""

    def __init__(
        self,
        callbacks: Optional[StreamCallbacks],
        *,
        provider: str,
        model: str,
        logger: logging.Logger,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self._callbacks = callbacks or StreamCallbacks()
        self.provider = provider
        self.model = model
        self.logger = logger
        self.ctx = ctx or LogContext(provider=provider, model=model)
        self.state = ExchangeState.CONNECTING
        self.metrics = StreamMetrics()
        self.error: Optional[ProviderError] = None

    @property
    def finished(self) -> bool:
        return self.state.is_terminal

    def start(self) -> None:
        """Connection is open: move to ``STREAMING`` and fire ``on_start``."""
        if self.state is not ExchangeState.CONNECTING:
            return
        self.state = ExchangeState.STREAMING
        normalized_log_event(self.logger, "stream.connected", self.ctx, phase="start", emitted=False)
        self._invoke("on_start")

    def token(self, text: str) -> bool:
        """Deliver a text fragment. Returns ``False`` when it was not delivered."""
        if self.finished or not text:
            return False
        if self.state is ExchangeState.CONNECTING:
            self.start()
        self.metrics.record_token(text)
        self._invoke("on_token", text)
        return True

    def complete(self) -> bool:
        """Finish successfully. Returns ``False`` if the exchange already ended."""
        if self.finished:
            return False
        self.state = ExchangeState.COMPLETE
        finalize_stream(logger=self.logger, ctx=self.ctx, metrics=self.metrics)
        self._invoke("on_complete")
        return True

    def fail(self, error: ProviderError) -> bool:
        """Finish with ``error``. Returns ``False`` if the exchange already ended."""
        if self.finished:
            return False
        self.state = ExchangeState.FAILED
        self.error = error
        finalize_stream(logger=self.logger, ctx=self.ctx, metrics=self.metrics, error=error)
        self._invoke("on_error", error)
        return True

    def cancel(self) -> bool:
        """Finish silently. Returns ``False`` if the exchange already ended."""
        if self.finished:
            return False
        self.state = ExchangeState.CANCELLED
        self.metrics.close()
        normalized_log_event(
            self.logger,
            "stream.cancelled",
            self.ctx,
            phase="finalize",
            emitted=self.metrics.emitted > 0,
            error_code=ErrorCode.CANCELLED.value,
            emitted_count=self.metrics.emitted,
            total_duration_ms=self.metrics.total_duration_ms,
        )
        return True

    def _invoke(self, name: str, *args: Any) -> None:
        callback = getattr(self._callbacks, name)
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as exc:  # caller bug; the stream keeps going
            normalized_log_event(
                self.logger,
                "stream.callback_error",
                self.ctx,
                phase="deliver",
                level=logging.ERROR,
                callback=name,
                error_type=type(exc).__name__,
                error=str(exc)[:200],
            )


__all__ = ["StreamDispatcher"]
