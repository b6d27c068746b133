"""HTTP utilities package.

Exposes pooled ``httpx.AsyncClient`` instances for probes and model listing.
"""

from .client import get_async_client, close_all_clients

__all__ = ["get_async_client", "close_all_clients"]
