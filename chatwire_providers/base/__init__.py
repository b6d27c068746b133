"""
Providers Base Package

Vendor-independent building blocks shared by every adapter:

- Transport: the streaming HTTP primitive
- Interfaces: the ``ChatStreamProvider`` contract and ``BaseChatProvider``
- Models (DTOs): messages, options, check results, model listings
- Streaming: exchange state, dedup, callback dispatch, async facade
- Repositories: credential resolution
- Factory: lazy creation of adapters by name
"""

from .cancellation import CancellationToken, CancelledError
from .chat_provider import BaseChatProvider
from .errors import ErrorCode, ProviderError, classify_exception
from .factory import ProviderFactory, UnknownProviderError
from .interfaces import ChatStreamProvider, HasDefaultModel
from .models import (
    CheckReason,
    CheckResult,
    Message,
    ModelInfo,
    StreamOptions,
    StreamRequest,
)
from .repositories.keys import KeyResolution, KeysRepository
from .status import ProviderStatus, status_from_check, status_tooltip
from .streaming import (
    ChatStreamEvent,
    ExchangeState,
    StreamCallbacks,
    StreamController,
    StreamDispatcher,
    StreamMetrics,
)
from .timeouts import TimeoutConfig, get_timeout_config
from .transport import ConnectionConfig, ConnectionHandlers, StreamingTransport, TransportHTTPError

__all__ = [
    "BaseChatProvider",
    "CancellationToken",
    "CancelledError",
    "ChatStreamEvent",
    "ChatStreamProvider",
    "CheckReason",
    "CheckResult",
    "ConnectionConfig",
    "ConnectionHandlers",
    "ErrorCode",
    "ExchangeState",
    "HasDefaultModel",
    "KeyResolution",
    "KeysRepository",
    "Message",
    "ModelInfo",
    "ProviderError",
    "ProviderFactory",
    "ProviderStatus",
    "StreamCallbacks",
    "StreamController",
    "StreamDispatcher",
    "StreamMetrics",
    "StreamOptions",
    "StreamRequest",
    "StreamingTransport",
    "TimeoutConfig",
    "TransportHTTPError",
    "UnknownProviderError",
    "classify_exception",
    "get_timeout_config",
    "status_from_check",
    "status_tooltip",
]
