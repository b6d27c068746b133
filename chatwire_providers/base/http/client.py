"""Shared async HTTP client pool.

Purpose:
    Reuse ``httpx.AsyncClient`` instances for the short non-streaming requests
    adapters make (connectivity probes, model listing) instead of opening a
    connection pool per call.

External dependencies:
    - ``httpx`` for the async HTTP client.

Lifecycle & cleanup:
    - An ``AsyncClient`` is bound to the event loop that first used it, so the
      pool is keyed by the running loop and then by ``(base_url, purpose)``.
      Pools of loops that were garbage collected disappear with them.
    - :func:`close_all_clients` closes the clients of the current loop; call it
      from application shutdown or test teardown.
"""

from __future__ import annotations

import asyncio
import threading
import weakref
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import build_httpx_timeout

_PoolKey = Tuple[Optional[str], str]
_CLIENTS: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, Dict[_PoolKey, httpx.AsyncClient]]" = (
    weakref.WeakKeyDictionary()
)
_LOCK = threading.RLock()


def get_async_client(base_url: Optional[str], purpose: str) -> httpx.AsyncClient:
    """Return a pooled ``httpx.AsyncClient`` for the running loop.

    Parameters:
        base_url: Optional base URL set on the client; ``None`` shares a
            client across hosts.
        purpose: Short discriminator (e.g. ``"gemini.probe"``).

    Raises:
        RuntimeError: when called outside a running event loop.
    """
    loop = asyncio.get_running_loop()
    key = (base_url, purpose)
    with _LOCK:
        pool = _CLIENTS.setdefault(loop, {})
        client = pool.get(key)
        if client is None or client.is_closed:
            timeout = build_httpx_timeout(streaming=False)
            client = httpx.AsyncClient(base_url=base_url, timeout=timeout) if base_url else httpx.AsyncClient(timeout=timeout)
            pool[key] = client
        return client


async def close_all_clients() -> None:
    """Close and forget every pooled client of the running loop."""
    loop = asyncio.get_running_loop()
    with _LOCK:
        pool = _CLIENTS.pop(loop, {})
    for client in pool.values():
        await client.aclose()


__all__ = ["get_async_client", "close_all_clients"]
