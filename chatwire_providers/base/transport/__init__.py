"""Streaming HTTP transport primitive.

Exposes :class:`StreamingTransport` and the connection types adapters use to
describe a request and receive its payloads.
"""

from .connection import ConnectionConfig, ConnectionHandlers, Framing
from .errors import TransportHTTPError
from .framing import iter_nonempty_lines, iter_raw_chunks, iter_sse_data
from .handle import ConnectionHandle
from .streaming_transport import StreamingTransport

__all__ = [
    "ConnectionConfig",
    "ConnectionHandlers",
    "ConnectionHandle",
    "Framing",
    "StreamingTransport",
    "TransportHTTPError",
    "iter_nonempty_lines",
    "iter_raw_chunks",
    "iter_sse_data",
]
