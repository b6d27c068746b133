"""Transport-level HTTP failure."""
from __future__ import annotations

from typing import Optional

# Keeps log lines and UI messages bounded when a server returns an HTML page.
MAX_ERROR_BODY_CHARS = 2000


class TransportHTTPError(Exception):
    """Raised when the server answers a streaming request with a non-2xx status.

    Attributes:
        status_code: HTTP status of the response.
        body: Response body text, truncated to ``MAX_ERROR_BODY_CHARS``.
        url: Request URL (query string stripped).
    """

    def __init__(self, status_code: int, body: str = "", url: Optional[str] = None) -> None:
        self.status_code = status_code
        self.body = body[:MAX_ERROR_BODY_CHARS]
        self.url = url
        super().__init__(f"HTTP {status_code}" + (f": {self.body}" if self.body else ""))


__all__ = ["TransportHTTPError", "MAX_ERROR_BODY_CHARS"]
