"""Focused tests for chatwire_providers.base.logging.

Covers:
- _parse_level string parsing
- _coerce_tokens stability
- normalized_log_event emits required keys without overwriting them
- JsonFormatter flattening and configure_logger file handling
"""
from __future__ import annotations

import json
import logging

from chatwire_providers.base.log_support import JsonFormatter, LogContext
from chatwire_providers.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    _coerce_tokens,  # type: ignore[attr-defined]
    _parse_level,  # type: ignore[attr-defined]
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)


def test_parse_level_variants():
    assert _parse_level(None) == logging.INFO  # nosec B101
    assert _parse_level("debug") == logging.DEBUG  # nosec B101
    assert _parse_level("WARN") == logging.WARNING  # nosec B101
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR  # nosec B101


def test_coerce_tokens():
    assert _coerce_tokens(None) is None  # nosec B101
    assert _coerce_tokens(5) == {"count": 5}  # nosec B101
    assert _coerce_tokens({"prompt": 1}) == {"prompt": 1}  # nosec B101
    assert _coerce_tokens(1.5) == {"value": "1.5"}  # nosec B101


def test_logger_names_are_namespaced():
    assert get_logger("providers.gemini").name == "chatwire.providers.gemini"  # nosec B101
    assert get_logger("chatwire.transport").name == "chatwire.transport"  # nosec B101
    assert get_logger().name == "chatwire"  # nosec B101


def test_normalized_log_event_emits_required_keys(log_records):
    logger = get_logger("providers.test.logging")
    ctx = LogContext(provider="p", model="m", exchange_id=3)
    normalized_log_event(
        logger,
        "stream.adapter.end",
        ctx,
        phase="finalize",
        error_code="timeout",
        emitted=True,
        tokens={"prompt": 10, "completion": 5},
        structured=False,
        dropped=None,
    )

    payload = json.loads(log_records[-1].getMessage())
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in payload  # nosec B101
    assert payload["structured"] is True  # nosec B101
    assert payload["attempt"] is None  # nosec B101
    assert payload["error_code"] == "timeout"  # nosec B101
    assert payload["exchange_id"] == 3  # nosec B101
    assert "dropped" not in payload  # nosec B101


def test_log_event_skips_disabled_levels_and_none(log_records, monkeypatch):
    logger = get_logger("providers.test.quiet")
    log_event(logger, "visible", LogContext(provider="p"), a=1, b=None)
    payload = json.loads(log_records[-1].getMessage())
    assert payload == {"event": "visible", "provider": "p", "a": 1}  # nosec B101

    monkeypatch.setenv("CHATWIRE_LOG_LEVEL", "ERROR")
    get_logger()
    count = len(log_records)
    log_event(logger, "hidden", level=logging.INFO)
    assert len(log_records) == count  # nosec B101


def test_json_formatter_flattens_structured_messages():
    record = logging.LogRecord("chatwire.x", logging.INFO, __file__, 1, json.dumps({"event": "e", "n": 1}), None, None)
    out = json.loads(JsonFormatter().format(record))
    assert out["event"] == "e" and out["n"] == 1 and out["logger"] == "chatwire.x"  # nosec B101

    plain = logging.LogRecord("chatwire.x", logging.WARNING, __file__, 1, "plain text", None, None)
    assert json.loads(JsonFormatter().format(plain))["msg"] == "plain text"  # nosec B101


def test_configure_logger_file_handler(tmp_path):
    target = tmp_path / "logs" / "chatwire.log"
    logger = configure_logger(level="DEBUG", file_path=str(target))
    try:
        log_event(get_logger("providers.file"), "to.file", level=logging.WARNING)
        for handler in logger.handlers:
            handler.flush()
        lines = target.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[-1])["event"] == "to.file"  # nosec B101
    finally:
        configure_logger(level=logging.INFO, file_path=None)

    assert all(getattr(h, "baseFilename", None) != str(target) for h in logger.handlers)  # nosec B101
