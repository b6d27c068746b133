from __future__ import annotations

import pytest

import chatwire_providers
from chatwire_providers.base.dto import AdapterParams
from chatwire_providers.base.factory import ProviderFactory, UnknownProviderError, create_provider
from chatwire_providers.base.interfaces import ChatStreamProvider
from chatwire_providers.gemini import GeminiProvider
from chatwire_providers.ollama import OllamaProvider
from chatwire_providers.openai import OpenAIProvider


def test_factory_unknown_provider():
    with pytest.raises(UnknownProviderError):
        ProviderFactory.create("nope")


def test_factory_import_failure(monkeypatch):
    monkeypatch.setattr(
        ProviderFactory,
        "_PROVIDERS",
        {"bogus": {"module": "chatwire_providers.gemini.client", "class": "Missing"}},
        raising=False,
    )
    with pytest.raises(UnknownProviderError):
        ProviderFactory.create("bogus")


@pytest.mark.parametrize(
    "name, cls",
    [("gemini", GeminiProvider), ("Google AI", GeminiProvider), ("  google   ai ", GeminiProvider), ("OpenAI", OpenAIProvider), ("ollama", OllamaProvider)],
)
def test_names_and_display_names(name, cls):
    provider = ProviderFactory.create(name)
    assert isinstance(provider, cls)  # nosec B101
    assert isinstance(provider, ChatStreamProvider)  # nosec B101


def test_resolve_aliases():
    assert ProviderFactory.resolve_name("Claude") == "anthropic"  # nosec B101
    assert ProviderFactory.resolve_name("Grok") == "xai"  # nosec B101
    assert ProviderFactory.resolve_name("DeepSeek") == "deepseek"  # nosec B101
    assert ProviderFactory.resolve_name("mystery") is None  # nosec B101
    assert ProviderFactory.supported() == ("gemini", "openai", "anthropic", "deepseek", "openrouter", "xai", "ollama")  # nosec B101


def test_params_are_merged_into_constructor_kwargs():
    params = AdapterParams(
        model="gemini-2.5-pro",
        api_key="k",  # pragma: allowlist secret - dummy test value
        headers={"X-A": "1", "X-B": "1"},
        extra={"online_check": False, "temperature": 0.2},
    )
    provider = ProviderFactory.create("gemini", params=params, headers={"X-B": "2"})

    assert provider.default_model() == "gemini-2.5-pro"  # nosec B101
    assert provider._extra_headers == {"X-A": "1", "X-B": "2"}  # nosec B101
    assert provider._online_check is False  # nosec B101
    assert provider._temperature == 0.2  # nosec B101


def test_initialization_failure_is_wrapped(monkeypatch, tmp_path):
    from chatwire_providers.config import reset_config_cache

    broken = tmp_path / "broken.yaml"
    broken.write_text("gemini: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("CHATWIRE_CONFIG_FILE", str(broken))
    reset_config_cache()

    with pytest.raises(UnknownProviderError, match="Failed to initialize"):
        ProviderFactory.create("gemini")


def test_adapter_params_reject_unknown_fields():
    with pytest.raises(ValueError):
        AdapterParams(unknown="x")


def test_package_level_create():
    assert isinstance(chatwire_providers.create("gemini"), GeminiProvider)  # nosec B101
    assert isinstance(create_provider("openai"), OpenAIProvider)  # nosec B101
    assert chatwire_providers.__version__  # nosec B101
