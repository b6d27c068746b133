"""Response body framing.

Each helper turns an async iterator over decoded text (``response.aiter_lines``
or ``response.aiter_text``) into an async iterator of payload strings.
"""
from __future__ import annotations

from typing import AsyncIterable, AsyncIterator, List


async def iter_sse_data(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Yield the ``data`` field of each Server-Sent Event.

    Multiple ``data`` lines of one event are joined with ``\\n``; comment
    lines and the ``event``/``id``/``retry`` fields are ignored. An event still
    pending when the body ends is flushed.
    """
    data_lines: List[str] = []
    async for line in lines:
        line = line.rstrip("\r")
        if not line:
            if data_lines:
                yield "\n".join(data_lines)
                data_lines = []
            continue
        if line.startswith(":"):
            continue
        name, _, value = line.partition(":")
        if name != "data":
            continue
        data_lines.append(value[1:] if value.startswith(" ") else value)
    if data_lines:
        yield "\n".join(data_lines)


async def iter_nonempty_lines(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Yield stripped, non-empty lines (newline-delimited JSON bodies)."""
    async for line in lines:
        line = line.strip()
        if line:
            yield line


async def iter_raw_chunks(chunks: AsyncIterable[str]) -> AsyncIterator[str]:
    """Yield non-empty text chunks unchanged."""
    async for chunk in chunks:
        if chunk:
            yield chunk


__all__ = ["iter_sse_data", "iter_nonempty_lines", "iter_raw_chunks"]
