"""Base structured logging utilities for the chatwire layer.

Rationale:
- One place that configures JSON logging for the transport, the streaming
  helpers and every adapter.
- Event payloads are single-line JSON objects; ``normalized_log_event``
  guarantees the canonical keys (``structured``, ``phase``, ``attempt``,
  ``emitted``, ``tokens``) so dashboards can filter across providers.

Environment:
- ``CHATWIRE_LOG_LEVEL`` sets the level of the shared ``chatwire`` logger.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional

from .log_support import JsonFormatter, LogContext

ROOT_LOGGER_NAME = "chatwire"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_BASE_LOGGER_ATTR = "_chatwire_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_chatwire_console_handler"
_FILE_HANDLER_ATTR = "_chatwire_file_handler"


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a logging level name, falling back to ``default`` on unknown input."""
    if not value:
        return default
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Initialize (once) and return the shared ``chatwire`` logger."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    desired_level = _parse_level(os.getenv("CHATWIRE_LOG_LEVEL"), default=level)
    if getattr(logger, _BASE_LOGGER_ATTR, False):
        if logger.level != desired_level:
            logger.setLevel(desired_level)
        # pytest capture closes sys.stderr between tests; re-home the handler.
        for existing in list(logger.handlers):
            if not getattr(existing, _CONSOLE_HANDLER_ATTR, False):
                continue
            stream_obj = getattr(existing, "stream", None)
            if stream_obj is None or getattr(stream_obj, "closed", False):
                with contextlib.suppress(ValueError):
                    existing.setStream(sys.stderr)  # type: ignore[attr-defined]
        return logger

    logger.setLevel(desired_level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    logger.handlers[:] = [handler]
    logger.propagate = False
    setattr(logger, _BASE_LOGGER_ATTR, True)
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return a logger under the shared ``chatwire`` hierarchy.

    Short names such as ``"providers.gemini"`` are namespaced to
    ``"chatwire.providers.gemini"``; child loggers propagate to the base logger
    and carry no handlers of their own.
    """
    base_logger = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == ROOT_LOGGER_NAME:
        return base_logger
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared ``chatwire`` logger at runtime.

    Parameters
    ----------
    level: int | str | None
        Desired level, numeric or by name. ``None`` keeps the current level.
    file_path: Optional[str]
        When provided, attach (or re-point) a rotating file handler writing to
        this path. When ``None``, any file handler attached here is removed.
    json_mode: bool
        JSON formatter (default) or plain text for the handlers touched here.

    Returns
    -------
    logging.Logger
        The configured base logger.
    """
    logger = _ensure_base_logger(json_mode=json_mode, level=logging.INFO)
    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level) if isinstance(level, str) else level)

    managed = [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]
    if file_path is None:
        for h in managed:
            logger.removeHandler(h)
            h.close()
        return logger

    abs_path = os.path.abspath(os.path.expanduser(file_path))
    os.makedirs(os.path.dirname(abs_path), exist_ok=True)
    existing: Optional[logging.FileHandler] = None
    for h in managed:
        if getattr(h, "baseFilename", None) == abs_path:
            existing = h  # type: ignore[assignment]
        else:
            logger.removeHandler(h)
            h.close()
    if existing is None:
        # 10MB x 5 backups
        existing = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
        setattr(existing, _FILE_HANDLER_ATTR, True)
        logger.addHandler(existing)
    existing.setFormatter(_formatter(json_mode))
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit a structured log event as one JSON line.

    Parameters
    ----------
    logger: logging.Logger
        Logger returned by ``get_logger``.
    event: str
        Event name (e.g. ``stream.start``).
    ctx: LogContext | None
        Provider/model context; merged shallowly.
    level: int
        Logging level of the record.
    keep_none: bool
        When ``True``, keys whose values are ``None`` are kept as JSON ``null``.
    **fields: Any
        Arbitrary serializable key/value pairs.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "emitted",
    "tokens",
)


def _coerce_tokens(tokens: Any) -> Any:
    """Coerce token usage info into a JSON-friendly mapping (or ``None``)."""
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens.items())
    if isinstance(tokens, int):
        return {"count": tokens}
    return {"value": repr(tokens)}


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit a normalized structured log event with the canonical keys.

    ``error_code`` is omitted when ``None``; every other normalized key is
    always present. ``extra_fields`` never overwrite normalized values.
    """
    base_fields: Dict[str, Any] = {
        "structured": True,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _coerce_tokens(tokens),
    }
    if error_code is not None:
        base_fields["error_code"] = error_code
    for k, v in extra_fields.items():
        if v is None or base_fields.get(k) is not None:
            continue
        base_fields[k] = v
    log_event(logger, event, ctx, level=level, keep_none=True, **base_fields)


__all__ = [
    "LogContext",
    "ROOT_LOGGER_NAME",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
