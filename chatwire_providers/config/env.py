"""chatwire_providers.config.env
=============================

Provider → environment variable mapping for API keys.

Design Notes
------------
- ``ENV_MAP`` holds the canonical variable per provider. Providers with more
  than one accepted name list them in ``ENV_ALIASES``, canonical first, which
  sets precedence.
- Ollama runs locally without a key and therefore has no entry.

Failure Modes
-------------
- Helpers never raise on unknown providers or unset variables; they return
  ``None`` and leave the decision to the caller.
"""

from __future__ import annotations

import os
from typing import Dict, Iterator, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "xai": "XAI_API_KEY",
}

# Google tooling historically used GOOGLE_API_KEY for the same credential.
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "your_api_key", "your-api-key")


def is_placeholder(val: Optional[str]) -> bool:
    """Return True for values that look like unfilled template entries.

    Used by the ``.env`` loader, which replaces placeholders but never real
    values already present in the environment.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return any(marker in v for marker in _PLACEHOLDER_MARKERS)


def get_env_var_name(provider: str) -> Optional[str]:
    """Canonical environment variable for ``provider`` (case-insensitive)."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterator[str]:
    """Yield accepted variable names for ``provider``, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, variable_name)`` of the first non-blank candidate.

    ``(None, None)`` when nothing is set. Whitespace-only values count as unset.
    """
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and val.strip():
            return val.strip(), name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
