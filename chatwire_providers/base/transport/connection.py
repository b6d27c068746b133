"""Connection configuration and handler bundle for ``StreamingTransport``."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Literal, Optional

import httpx

Framing = Literal["sse", "lines", "raw"]


@dataclass
class ConnectionConfig:
    """Describes one long-lived streaming request.

    Attributes:
        url: Absolute request URL.
        method: HTTP method, ``POST`` for every chat endpoint.
        headers: Request headers.
        body: ``dict``/``list`` bodies are sent as JSON, ``str``/``bytes`` verbatim.
        framing: How the response body is split into payloads: ``"sse"``
            (event ``data`` fields), ``"lines"`` (newline-delimited JSON) or
            ``"raw"`` (decoded text chunks as they arrive).
        debug_tag: Label used in transport log events.
        timeout: Overrides the timeout derived from ``get_timeout_config``.
    """

    url: str
    method: str = "POST"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    framing: Framing = "sse"
    debug_tag: Optional[str] = None
    timeout: Optional[httpx.Timeout] = None


@dataclass
class ConnectionHandlers:
    """Callbacks invoked by the transport.

    ``on_start`` fires once the response headers arrived with a success
    status; ``on_data`` fires per framed payload; exactly one of ``on_error``
    or ``on_end`` terminates the connection.
    """

    on_start: Optional[Callable[[], None]] = None
    on_data: Optional[Callable[[str], None]] = None
    on_error: Optional[Callable[[BaseException], None]] = None
    on_end: Optional[Callable[[], None]] = None


__all__ = ["ConnectionConfig", "ConnectionHandlers", "Framing"]
