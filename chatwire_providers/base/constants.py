"""Base shared constants for provider adapters.

Security
--------
Only generic sentinel strings live here; there are no credentials.

# pragma: allowlist secret
"""
from __future__ import annotations

# Missing credential sentinel, used as the ProviderError message
MISSING_API_KEY_ERROR = "missing_api_key"  # pragma: allowlist secret - generic placeholder string, not a real secret

# Chat completions stream terminator
SSE_DONE_SENTINEL = "[DONE]"

# Limits payload excerpts written to logs
LOG_PAYLOAD_PREVIEW_CHARS = 200

__all__ = [
    "MISSING_API_KEY_ERROR",
    "SSE_DONE_SENTINEL",
    "LOG_PAYLOAD_PREVIEW_CHARS",
]
