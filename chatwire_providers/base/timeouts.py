"""Unified timeout configuration for the transport and probes.

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values in seconds.

get_timeout_config()
    Returns a cached configuration, re-parsed only when one of the supported
    environment variables changes:
        CHATWIRE_TIMEOUT_CONNECT_SECONDS
        CHATWIRE_TIMEOUT_STREAM_SECONDS
        CHATWIRE_TIMEOUT_HTTP_SECONDS

build_httpx_timeout()
    Translates the config into an ``httpx.Timeout``. Streaming requests use the
    stream idle timeout as the read timeout; probes use the HTTP timeout.

Design Constraints
------------------
1. No ad-hoc numeric timeouts outside this module.
2. Avoid per-call env parsing (cache keyed by the raw env values).

Failure Modes
-------------
httpx raises ``httpx.ConnectTimeout`` / ``httpx.ReadTimeout`` when a deadline
elapses; classification maps both to ``ErrorCode.TIMEOUT``.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Tuple

import httpx

_ENV_CONNECT = "CHATWIRE_TIMEOUT_CONNECT_SECONDS"
_ENV_STREAM = "CHATWIRE_TIMEOUT_STREAM_SECONDS"
_ENV_HTTP = "CHATWIRE_TIMEOUT_HTTP_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Timeout for establishing the TCP/TLS connection.
        stream_timeout_seconds: Idle timeout while waiting for the next chunk of
            a streaming response.
        http_timeout_seconds: Timeout for non-streaming requests (model lists,
            connectivity probes).
    """

    connect_timeout_seconds: float = 10.0
    stream_timeout_seconds: float = 60.0
    http_timeout_seconds: float = 30.0


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: Tuple[str, str, str] | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from the environment, else return ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the cached :class:`TimeoutConfig`, refreshed on env changes."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = (os.getenv(_ENV_CONNECT, ""), os.getenv(_ENV_STREAM, ""), os.getenv(_ENV_HTTP, ""))
    if _CACHED is not None and guard == _ENV_GUARD:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_CONNECT, defaults.connect_timeout_seconds),
        stream_timeout_seconds=_parse_env_float(_ENV_STREAM, defaults.stream_timeout_seconds),
        http_timeout_seconds=_parse_env_float(_ENV_HTTP, defaults.http_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


def build_httpx_timeout(cfg: TimeoutConfig | None = None, *, streaming: bool = True) -> httpx.Timeout:
    """Build an ``httpx.Timeout`` for a streaming request or a probe."""
    cfg = cfg or get_timeout_config()
    read = cfg.stream_timeout_seconds if streaming else cfg.http_timeout_seconds
    return httpx.Timeout(read, connect=cfg.connect_timeout_seconds)


__all__ = ["TimeoutConfig", "get_timeout_config", "build_httpx_timeout"]
