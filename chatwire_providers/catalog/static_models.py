"""Static model catalog bundled with the package.

Used by adapters whose backend offers no model listing endpoint (Gemini, as
configured here) and as the fallback when a dynamic listing fails. Loaded via
``importlib.resources`` from ``static_models.json``.
"""
from __future__ import annotations

from functools import lru_cache
from importlib import resources
import json
from typing import Any, Dict, List, Optional

_CATALOG_PACKAGE = "chatwire_providers.catalog"
_CATALOG_RESOURCE = "static_models.json"


@lru_cache(maxsize=1)
def load_catalog() -> Dict[str, Any]:
    """Parse the packaged catalog (cached for the life of the process)."""
    data = resources.files(_CATALOG_PACKAGE).joinpath(_CATALOG_RESOURCE).read_text(encoding="utf-8")
    return json.loads(data)


def _normalize(name: str) -> str:
    return " ".join((name or "").lower().split())


def resolve_catalog_name(provider_name: str) -> Optional[str]:
    """Map a canonical or display name (``"Google AI"``) to the catalog key."""
    providers = load_catalog().get("providers", {})
    wanted = _normalize(provider_name)
    for key, entry in providers.items():
        if wanted in (_normalize(key), _normalize(entry.get("display_name", ""))):
            return key
    return None


def get_static_models(provider_name: str) -> Optional[List[Dict[str, Any]]]:
    """Return the catalog entries (``{"id", "label"}`` dicts) for a provider.

    ``None`` when the provider has no static catalog.
    """
    key = resolve_catalog_name(provider_name)
    if key is None:
        return None
    models = load_catalog()["providers"][key].get("models") or []
    return [dict(m) for m in models]


__all__ = ["get_static_models", "load_catalog", "resolve_catalog_name"]
