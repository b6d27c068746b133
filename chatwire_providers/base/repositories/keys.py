"""
Keys Repository

Purpose
- Centralize API key resolution for providers.
- Sources, highest priority first:
    1) a per-model key from the config file section ``model_keys``
    2) environment variables (canonical name, then aliases)
    3) the ``api_key`` entry of the config file section
- Read-only: nothing is ever written back.

Usage
- repo = KeysRepository()
- key = repo.get_api_key("gemini")
- resolver = repo.resolver_for("gemini")  # callable(model) -> key | None
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ...config import get_file_section
from ...config.env import ENV_MAP, resolve_provider_key


@dataclass
class KeyResolution:
    provider: str
    api_key: Optional[str]
    source: str  # "model", "env", "config", "none"
    extra: Dict[str, Any] = field(default_factory=dict)


def _clean(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class KeysRepository:
    """Resolve provider credentials; accessors never raise and return ``None`` when unset."""

    ENV_MAP = ENV_MAP

    def get_api_key(self, provider: str, model: Optional[str] = None) -> Optional[str]:
        return self.get_resolution(provider, model).api_key

    def get_resolution(self, provider: str, model: Optional[str] = None) -> KeyResolution:
        p = (provider or "").lower().strip()
        section = get_file_section(p)

        model_keys = section.get("model_keys")
        if model and isinstance(model_keys, dict):
            if key := _clean(model_keys.get(model)):
                return KeyResolution(provider=p, api_key=key, source="model", extra={"model": model})

        val, used = resolve_provider_key(p)
        if val:
            return KeyResolution(provider=p, api_key=val, source="env", extra={"env_var": used})

        if key := _clean(section.get("api_key")):
            return KeyResolution(provider=p, api_key=key, source="config")

        return KeyResolution(provider=p, api_key=None, source="none")

    def resolver_for(self, provider: str, explicit: Optional[str] = None) -> Callable[[Optional[str]], Optional[str]]:
        """Return a ``key_resolver`` for adapters.

        An explicit key (constructor argument) always wins over stored ones.
        """
        explicit = _clean(explicit)

        def _resolve(model: Optional[str] = None) -> Optional[str]:
            return explicit or self.get_api_key(provider, model)

        return _resolve


__all__ = ["KeyResolution", "KeysRepository"]
