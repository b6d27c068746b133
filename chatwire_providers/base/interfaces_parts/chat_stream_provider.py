"""ChatStreamProvider Protocol (single-class module).

The contract every backend adapter fulfils. Streaming is push-based: callers
pass :class:`StreamCallbacks` and ``chat_stream`` returns as soon as the
connection has been started.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Protocol, Union, runtime_checkable

from ..models import CheckResult, Message, ModelInfo, StreamOptions
from ..streaming.callbacks import StreamCallbacks


@runtime_checkable
class ChatStreamProvider(Protocol):
    """Uniform streaming chat contract.

    Invariants:
        - One exchange per instance at a time; a new ``chat_stream`` cancels
          the previous exchange silently.
        - Per exchange, at most one of ``on_complete`` / ``on_error`` fires and
          no ``on_token`` follows it.
        - ``check_connection`` and ``cancel_stream`` never raise.
    """

    @property
    def provider_name(self) -> str:  # pragma: no cover - protocol
        ...

    async def fetch_models(self) -> Optional[List[ModelInfo]]:
        """Models offered by the backend; ``None`` when there is no catalog."""
        ...

    async def check_connection(self) -> CheckResult:
        """Report whether the backend is usable with the configured credential."""
        ...

    async def chat_stream(
        self,
        model: Optional[str],
        messages: Iterable[Union[Message, Mapping[str, Any]]],
        callbacks: Optional[StreamCallbacks] = None,
        options: Union[StreamOptions, Mapping[str, Any], None] = None,
    ) -> None:
        """Start one streaming exchange and return without waiting for it."""
        ...

    def cancel_stream(self) -> None:
        """Stop the active exchange; no callbacks fire for it afterwards."""
        ...

    async def destroy(self) -> None:
        """Release transport resources and reset per-exchange state."""
        ...
