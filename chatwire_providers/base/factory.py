"""Provider Factory utilities.

Purpose
-------
Map a configured backend name to an adapter instance. Adapters are imported
lazily with ``importlib`` so importing the factory stays cheap and free of
side effects.

Names
-----
Canonical names (``gemini``, ``openai``, ``anthropic``, ``deepseek``,
``openrouter``, ``xai``, ``ollama``) and the display names stored by the chat
client (``"Google AI"``, ``"OpenAI"`` ...) are both accepted,
case-insensitively.

Failure modes
-------------
:class:`UnknownProviderError` for unknown names, import failures, missing
adapter classes and constructor errors. No retries, no fallbacks.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from .dto.adapter_params import AdapterParams


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized."""


class ProviderFactory:
    """Create provider adapters by canonical or display name."""

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "gemini": {"module": "chatwire_providers.gemini.client", "class": "GeminiProvider"},
        "openai": {"module": "chatwire_providers.openai.client", "class": "OpenAIProvider"},
        "anthropic": {"module": "chatwire_providers.anthropic.client", "class": "AnthropicProvider"},
        "deepseek": {"module": "chatwire_providers.deepseek.client", "class": "DeepseekProvider"},
        "openrouter": {"module": "chatwire_providers.openrouter.client", "class": "OpenRouterProvider"},
        "xai": {"module": "chatwire_providers.xai.client", "class": "XAIProvider"},
        "ollama": {"module": "chatwire_providers.ollama.client", "class": "OllamaProvider"},
    }

    _ALIASES: Dict[str, str] = {
        "google ai": "gemini",
        "google": "gemini",
        "claude": "anthropic",
        "x.ai": "xai",
        "grok": "xai",
    }

    @classmethod
    def resolve_name(cls, provider: str) -> Optional[str]:
        """Return the canonical name for ``provider`` or ``None``."""
        name = " ".join((provider or "").lower().split())
        if name in cls._PROVIDERS:
            return name
        if name in cls._ALIASES:
            return cls._ALIASES[name]
        # Display names from the static catalog ("OpenAI", "DeepSeek" ...)
        from ..catalog import resolve_catalog_name

        catalog_name = resolve_catalog_name(name)
        return catalog_name if catalog_name in cls._PROVIDERS else None

    @classmethod
    def create(
        cls,
        provider: str,
        *,
        params: Optional[AdapterParams] = None,
        **kwargs: Any,
    ) -> Any:
        """Create a provider adapter instance.

        Parameters
        ----------
        provider:
            Canonical or display name (e.g. ``"gemini"`` or ``"Google AI"``).
        params:
            Optional :class:`AdapterParams`; explicit ``kwargs`` win over it.
        **kwargs:
            Adapter constructor keyword arguments.

        Raises
        ------
        UnknownProviderError
            Unknown provider, import failure, missing class or constructor error.
        """
        merged_kwargs = cls._coerce_params(params, kwargs)
        name = cls.resolve_name(provider)
        if name is None:
            raise UnknownProviderError(f"Unknown provider '{provider}'")
        entry = cls._PROVIDERS[name]
        module_path, class_name = entry["module"], entry["class"]

        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - packaging failure
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for provider '{provider}'"
            ) from exc

        try:
            return klass(**merged_kwargs)
        except TypeError as exc:
            raise UnknownProviderError(f"Invalid arguments for '{provider}' adapter constructor: {exc}") from exc
        except ValueError as exc:
            raise UnknownProviderError(f"Failed to initialize provider '{provider}': {exc}") from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Canonical provider names in deterministic order."""
        return tuple(cls._PROVIDERS.keys())

    @staticmethod
    def _coerce_params(params: Optional[AdapterParams], kwargs: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge ``AdapterParams`` into ``kwargs``.

        ``None`` fields are ignored, ``extra`` is flattened into keyword
        arguments, ``headers`` are merged with ``kwargs`` winning conflicts.
        """
        if params is None:
            return dict(kwargs)
        merged: Dict[str, Any] = params.model_dump(exclude_none=True)
        merged.pop("provider", None)
        extra = merged.pop("extra", {}) or {}
        for key, value in extra.items():
            merged.setdefault(key, value)
        if "headers" in merged and "headers" in kwargs:
            merged["headers"] = {**merged["headers"], **kwargs["headers"]}
            kwargs = {k: v for k, v in kwargs.items() if k != "headers"}
        merged.update(kwargs)
        return merged


def create_provider(provider: str, **kwargs: Any) -> Any:
    """Shortcut for :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(provider, **kwargs)


__all__ = ["ProviderFactory", "UnknownProviderError", "create_provider"]
