"""chatwire_providers package

Unified streaming-chat layer over multiple LLM backends.

Public API (re-exported):
    - Version: ``__version__``
    - Errors: :class:`ProviderError`, :class:`ErrorCode`
    - Factory: :func:`create`, :class:`ProviderFactory`
    - Contract and DTOs: :class:`ChatStreamProvider`, :class:`StreamCallbacks`,
      :class:`Message`, :class:`StreamOptions`, :class:`CheckResult`,
      :class:`ModelInfo`
    - Pull-style facade: :class:`StreamController`

Example::

    provider = create("gemini")
    await provider.chat_stream(
        "gemini-2.5-flash",
        [{"role": "user", "content": "Hello"}],
        StreamCallbacks(on_token=print),
    )
"""

from typing import Any, Optional

from .base.dto import AdapterParams
from .base.errors import ErrorCode, ProviderError
from .base.factory import ProviderFactory, UnknownProviderError
from .base.interfaces import ChatStreamProvider, HasDefaultModel
from .base.models import CheckReason, CheckResult, Message, ModelInfo, StreamOptions
from .base.streaming import StreamCallbacks, StreamController

__version__ = "0.1.0"


def create(provider_name: str, *, params: Optional[AdapterParams] = None, **kwargs: Any) -> ChatStreamProvider:
    """Instantiate an adapter by canonical or display name.

    Raises
    ------
    UnknownProviderError
        Unknown provider or invalid constructor arguments.
    """
    return ProviderFactory.create(provider_name, params=params, **kwargs)


__all__ = [
    "__version__",
    "AdapterParams",
    "ChatStreamProvider",
    "CheckReason",
    "CheckResult",
    "ErrorCode",
    "HasDefaultModel",
    "Message",
    "ModelInfo",
    "ProviderError",
    "ProviderFactory",
    "StreamCallbacks",
    "StreamController",
    "StreamOptions",
    "UnknownProviderError",
    "create",
]
