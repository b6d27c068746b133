"""Configuration layering: defaults, config file, env, .env and overrides."""
from __future__ import annotations

import json

import pytest

from chatwire_providers.config import get_model, get_provider_config, reset_config_cache
from chatwire_providers.config.env import (
    ENV_ALIASES,
    ENV_MAP,
    get_env_var_candidates,
    get_env_var_name,
    is_placeholder,
    resolve_provider_key,
)


def test_env_map_contains_expected_keys():
    for p in ["openai", "anthropic", "deepseek", "gemini", "openrouter", "xai"]:
        assert p in ENV_MAP  # nosec B101
    assert "ollama" not in ENV_MAP  # nosec B101
    assert get_env_var_name("Gemini") == "GEMINI_API_KEY"  # nosec B101
    assert list(get_env_var_candidates("gemini")) == list(ENV_ALIASES["gemini"])  # nosec B101


def test_gemini_key_alias_precedence(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "google")
    assert resolve_provider_key("gemini") == ("google", "GOOGLE_API_KEY")  # nosec B101
    monkeypatch.setenv("GEMINI_API_KEY", "gemini")
    assert resolve_provider_key("gemini") == ("gemini", "GEMINI_API_KEY")  # nosec B101
    monkeypatch.setenv("GEMINI_API_KEY", "   ")
    assert resolve_provider_key("gemini") == ("google", "GOOGLE_API_KEY")  # nosec B101


def test_is_placeholder():
    assert is_placeholder("your_api_key_here")  # nosec B101
    assert is_placeholder("CHANGEME")  # nosec B101
    assert not is_placeholder("sk-real")  # nosec B101
    assert not is_placeholder(None)  # nosec B101


def test_defaults_then_env_then_overrides(monkeypatch):
    assert get_model("gemini") == "gemini-2.5-flash"  # nosec B101
    cfg = get_provider_config("gemini")
    assert cfg["temperature"] == 0.7 and cfg["thinking_budget"] == 0  # nosec B101

    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-pro")
    monkeypatch.setenv("GEMINI_BASE_URL", "https://proxy.test")
    cfg = get_provider_config("gemini", overrides={"model": "override", "base_url": None})
    assert cfg["model"] == "override"  # nosec B101
    assert cfg["base_url"] == "https://proxy.test"  # nosec B101


def test_yaml_config_file(monkeypatch, tmp_path):
    path = tmp_path / "providers.yaml"
    path.write_text(
        "gemini:\n  model: gemini-from-file\n  temperature: 0.1\n  api_key: file-key\n"
        "ollama:\n  host: http://box:11434\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("CHATWIRE_CONFIG_FILE", str(path))
    reset_config_cache()

    cfg = get_provider_config("gemini")
    assert cfg["model"] == "gemini-from-file" and cfg["temperature"] == 0.1  # nosec B101
    assert cfg["api_key"] == "file-key"  # nosec B101 # pragma: allowlist secret - dummy test value
    assert get_provider_config("ollama")["host"] == "http://box:11434"  # nosec B101

    monkeypatch.setenv("GEMINI_MODEL", "gemini-from-env")
    assert get_model("gemini") == "gemini-from-env"  # nosec B101


def test_json_config_file(monkeypatch, tmp_path):
    path = tmp_path / "providers.json"
    path.write_text(json.dumps({"openai": {"base_url": "https://gateway.test/v1"}}), encoding="utf-8")
    monkeypatch.setenv("CHATWIRE_CONFIG_FILE", str(path))
    reset_config_cache()

    assert get_provider_config("openai")["base_url"] == "https://gateway.test/v1"  # nosec B101


def test_invalid_config_file_raises(monkeypatch, tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("CHATWIRE_CONFIG_FILE", str(path))
    reset_config_cache()

    with pytest.raises(ValueError):
        get_provider_config("gemini")


def test_dotenv_file_is_loaded_once(monkeypatch, tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_text(
        "# comment\nexport DEEPSEEK_API_KEY='from-dotenv'\nOPENAI_API_KEY=your_api_key\nXAI_API_KEY=\"x\"\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DOTENV_FILE", str(dotenv))
    monkeypatch.setenv("XAI_API_KEY", "already-set")
    # registered so monkeypatch restores the environment afterwards
    monkeypatch.setenv("DEEPSEEK_API_KEY", "your_api_key")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    reset_config_cache()

    assert get_provider_config("deepseek")["api_key"] == "from-dotenv"  # nosec B101 # pragma: allowlist secret - dummy test value
    assert get_provider_config("xai")["api_key"] == "already-set"  # nosec B101 # pragma: allowlist secret - dummy test value
