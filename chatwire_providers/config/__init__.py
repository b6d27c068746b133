"""Unified configuration layer for providers.

Goals
-----
* Centralize defaults (models, base URLs, generation defaults).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. External config file (JSON or YAML) pointed to by ``CHATWIRE_CONFIG_FILE``
    3. Environment variables (e.g. ``GEMINI_MODEL``, ``OLLAMA_HOST``)
    4. API key from :class:`KeysRepository` when still unset
    5. In-code overrides passed to ``get_provider_config``
* Load a ``.env`` file (path from ``DOTENV_FILE``, default ``.env``) once,
  before the first lookup.

Environment Variable Conventions
--------------------------------
``<PROVIDER>_MODEL``, ``<PROVIDER>_API_KEY``, ``<PROVIDER>_BASE_URL``,
``<PROVIDER>_HOST``, e.g. ``GEMINI_BASE_URL``, ``OLLAMA_HOST``.

External Config File
--------------------
Files ending in ``.yaml``/``.yml`` are parsed with PyYAML, anything else as
JSON. One section per provider::

    gemini:
      model: gemini-2.5-pro
      temperature: 0.4
      model_keys:
        gemini-2.5-pro: "<key used only for this model>"
    ollama:
      host: http://gpu-box:11434

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* get_model(provider: str) -> str | None
* reset_config_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    ANTHROPIC_API_VERSION,
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MAX_TOKENS,
    ANTHROPIC_DEFAULT_MODEL,
    DEEPSEEK_DEFAULT_BASE_URL,
    DEEPSEEK_DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_MODEL,
    GEMINI_DEFAULT_TEMPERATURE,
    GEMINI_DEFAULT_THINKING_BUDGET,
    OLLAMA_DEFAULT_HOST,
    OLLAMA_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENROUTER_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_MODEL,
    XAI_DEFAULT_BASE_URL,
    XAI_DEFAULT_MODEL,
)
from .env import is_placeholder

CONFIG_FILE_ENV = "CHATWIRE_CONFIG_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "gemini": {
        "model": GEMINI_DEFAULT_MODEL,
        "base_url": GEMINI_DEFAULT_BASE_URL,
        "temperature": GEMINI_DEFAULT_TEMPERATURE,
        "thinking_budget": GEMINI_DEFAULT_THINKING_BUDGET,
    },
    "openai": {"model": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL, "temperature": DEFAULT_TEMPERATURE},
    "deepseek": {"model": DEEPSEEK_DEFAULT_MODEL, "base_url": DEEPSEEK_DEFAULT_BASE_URL, "temperature": DEFAULT_TEMPERATURE},
    "xai": {"model": XAI_DEFAULT_MODEL, "base_url": XAI_DEFAULT_BASE_URL, "temperature": DEFAULT_TEMPERATURE},
    "openrouter": {
        "model": OPENROUTER_DEFAULT_MODEL,
        "base_url": OPENROUTER_DEFAULT_BASE_URL,
        "temperature": DEFAULT_TEMPERATURE,
    },
    "anthropic": {
        "model": ANTHROPIC_DEFAULT_MODEL,
        "base_url": ANTHROPIC_DEFAULT_BASE_URL,
        "api_version": ANTHROPIC_API_VERSION,
        "max_tokens": ANTHROPIC_DEFAULT_MAX_TOKENS,
        "temperature": DEFAULT_TEMPERATURE,
    },
    "ollama": {"model": OLLAMA_DEFAULT_MODEL, "host": OLLAMA_DEFAULT_HOST, "temperature": DEFAULT_TEMPERATURE},
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
    "host": "HOST",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight ``.env`` loader.

    Parses ``KEY=VALUE`` lines, ignoring comments and blank lines. Existing
    environment variables win unless their value looks like a placeholder.
    """
    global _DOTENV_LOADED  # noqa: PLW0603 - documented module cache
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    _DOTENV_LOADED = True
    if not os.path.isfile(path):
        return
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            if line.startswith("export "):
                line = line[len("export "):]
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip().strip('"').strip("'")
            if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                os.environ[k] = v


def _load_external_config() -> Dict[str, Any]:
    """Parse the file named by ``CHATWIRE_CONFIG_FILE`` (cached).

    Raises:
        ValueError: when the file exists but cannot be parsed or is not a mapping.
    """
    global _FILE_CACHE  # noqa: PLW0603 - documented module cache
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    if not path or not Path(path).is_file():
        _FILE_CACHE = {}
        return _FILE_CACHE
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text) if text.strip() else {}
    except (ValueError, yaml.YAMLError) as exc:
        raise ValueError(f"invalid provider config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"provider config file {path} must contain a mapping at top level")
    _FILE_CACHE = data
    return data


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None and val.strip():
            out[field] = val.strip()
    return out


def get_file_section(provider: str) -> Dict[str, Any]:
    """Return the external config file section for ``provider`` (may be empty)."""
    section = _load_external_config().get((provider or "").lower().strip())
    return dict(section) if isinstance(section, dict) else {}


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> key repo -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}
    cfg |= DEFAULTS.get(name, {})
    cfg |= get_file_section(name)
    cfg |= _env_overrides(name)

    if not cfg.get("api_key"):
        # Local import: the repository itself reads this module.
        from ..base.repositories.keys import KeysRepository

        if key := KeysRepository().get_api_key(name):
            cfg["api_key"] = key

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


def reset_config_cache() -> None:
    """Forget the parsed config file and the ``.env`` loaded flag (tests, reloads)."""
    global _FILE_CACHE, _DOTENV_LOADED  # noqa: PLW0603 - documented module cache
    _FILE_CACHE = None
    _DOTENV_LOADED = False


__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULTS",
    "get_file_section",
    "get_model",
    "get_provider_config",
    "reset_config_cache",
]
