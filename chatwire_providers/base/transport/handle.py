"""Handle to one in-flight streaming connection."""
from __future__ import annotations

import asyncio
from typing import Optional

from ..cancellation import CancellationToken


class ConnectionHandle:
    """Identity, cancel token and task of a connection.

    ``cancel`` is thread-safe: the asyncio task is cancelled on its own loop.
    """

    def __init__(self, handle_id: int, tag: str) -> None:
        self.id = handle_id
        self.tag = tag
        self.token = CancellationToken()
        self._task: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def attach(self, task: asyncio.Task, loop: asyncio.AbstractEventLoop) -> None:
        self._task = task
        self._loop = loop
        self.token.on_cancel(self._cancel_task)

    def _cancel_task(self, _reason: Optional[str]) -> None:
        task, loop = self._task, self._loop
        if task is None or loop is None or task.done():
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            # From inside its own task the next raise_if_cancelled() stops the read loop.
            if asyncio.current_task() is not task:
                task.cancel()
        elif not loop.is_closed():
            loop.call_soon_threadsafe(task.cancel)

    def cancel(self, reason: Optional[str] = None) -> bool:
        """Cancel the connection; ``False`` if it was already cancelled.

        A repeated call still cancels a task that outlived a stop issued from
        inside itself.
        """
        if self.token.cancel(reason):
            return True
        self._cancel_task(reason)
        return False

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    @property
    def done(self) -> bool:
        return self._task is None or self._task.done()

    async def wait(self) -> None:
        """Wait until the connection task has fully unwound."""
        if self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"ConnectionHandle(id={self.id}, tag={self.tag!r}, cancelled={self.cancelled}, done={self.done})"


__all__ = ["ConnectionHandle"]
