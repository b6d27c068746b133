"""Single-class Protocol modules re-exported by ``chatwire_providers.base.interfaces``."""

from .chat_stream_provider import ChatStreamProvider
from .has_default_model import HasDefaultModel

__all__ = ["ChatStreamProvider", "HasDefaultModel"]
