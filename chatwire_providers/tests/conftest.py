"""Pytest configuration for the chatwire provider test suite.

Every test runs against a clean credential/config environment: provider key
variables, config file pointers and the ``.env`` loader are neutralized so a
developer's real keys never leak into assertions or network calls.
"""

from __future__ import annotations

import logging
from typing import Iterator, List

import pytest

from chatwire_providers.config import ENV_FIELD_MAP, reset_config_cache
from chatwire_providers.config.defaults import SUPPORTED_PROVIDERS
from chatwire_providers.config.env import ENV_ALIASES, ENV_MAP


@pytest.fixture(autouse=True)
def isolated_provider_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Strip provider env vars and point the ``.env`` loader at a missing file."""
    names = set(ENV_MAP.values())
    for aliases in ENV_ALIASES.values():
        names.update(aliases)
    for provider in SUPPORTED_PROVIDERS:
        for suffix in ENV_FIELD_MAP.values():
            names.add(f"{provider.upper()}_{suffix}")
    for name in names:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("CHATWIRE_CONFIG_FILE", raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config_cache()
    yield
    reset_config_cache()


class _ListHandler(logging.Handler):
    """Capture chatwire log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - exercised via tests
        self.records.append(record)


@pytest.fixture()
def log_records(monkeypatch: pytest.MonkeyPatch) -> Iterator[List[logging.LogRecord]]:
    """Attach a capturing handler to the shared ``chatwire`` logger at DEBUG."""
    from chatwire_providers.base.logging import get_logger

    # get_logger re-applies the env level on every call
    monkeypatch.setenv("CHATWIRE_LOG_LEVEL", "DEBUG")
    base = get_logger()
    handler = _ListHandler()
    base.addHandler(handler)
    try:
        yield handler.records
    finally:
        base.removeHandler(handler)
