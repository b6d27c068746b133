"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose the cancellation constructs shared by the transport and the provider
adapters via the canonical ``chatwire_providers.base.cancellation`` import
path. Implementations live under ``cancellation_parts``.

Notes
-----
- ``CancellationToken`` carries the cancel flag for a single connection and
  fires registered callbacks once, which is how an in-flight asyncio task is
  torn down from ``cancel_stream``.
- ``CancelledError`` is raised by code that observes a cancellation request.
  It is distinct from ``asyncio.CancelledError``.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
