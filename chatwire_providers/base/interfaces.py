"""
Provider-agnostic interfaces (Protocols) for the providers layer.

Re-exports the single-class modules under
``chatwire_providers.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import ChatStreamProvider, HasDefaultModel

__all__ = ["ChatStreamProvider", "HasDefaultModel"]
