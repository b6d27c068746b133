"""
Provider-agnostic domain models (DTOs) public surface.

Re-exports the one-class-per-file implementations under
``chatwire_providers.base.models_parts``.
"""

from .models_parts.message import Message, Role, coerce_messages
from .models_parts.model_info import ModelInfo
from .models_parts.check_result import CheckReason, CheckResult, check_reason_for
from .models_parts.stream_options import StreamOptions
from .models_parts.stream_request import StreamRequest

__all__ = [
    "Message",
    "Role",
    "coerce_messages",
    "ModelInfo",
    "CheckReason",
    "CheckResult",
    "check_reason_for",
    "StreamOptions",
    "StreamRequest",
]
