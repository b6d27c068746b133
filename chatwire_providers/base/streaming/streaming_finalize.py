"""Finalize stream helper.

Emits the consolidated terminal log event of an exchange
(``stream.adapter.end`` / ``stream.adapter.error``) with its metrics.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..errors import ProviderError
from ..logging import LogContext, normalized_log_event
from .streaming_metrics import StreamMetrics


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    error: Optional[ProviderError] = None,
) -> None:
    """Close ``metrics`` and log the terminal event."""
    metrics.close()
    normalized_log_event(
        logger,
        "stream.adapter.end" if error is None else "stream.adapter.error",
        ctx,
        phase="finalize",
        emitted=metrics.emitted > 0,
        tokens=None,
        error_code=error.code.value if error is not None else None,
        level=logging.INFO if error is None else logging.WARNING,
        emitted_count=metrics.emitted,
        emitted_chars=metrics.emitted_chars,
        duplicates_dropped=metrics.duplicates_dropped,
        decode_errors=metrics.decode_errors,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        status_code=error.status_code if error is not None else None,
        error=error.message if error is not None else None,
    )


__all__ = ["finalize_stream"]
