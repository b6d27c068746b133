"""chatwire_providers.config.defaults
==================================

Small, stable default values used by the adapters. Every value can be
overridden through environment variables, the external config file or
constructor arguments (see ``chatwire_providers.config``).

This module imports nothing from the rest of the package so any layer can
depend on it.
"""

from __future__ import annotations

# ---- Gemini ----
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash"
GEMINI_DEFAULT_TEMPERATURE = 0.7
# Thinking is disabled unless the caller asks for a budget.
GEMINI_DEFAULT_THINKING_BUDGET = 0

# ---- OpenAI-compatible chat completions ----
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
DEEPSEEK_DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
XAI_DEFAULT_MODEL = "grok-3-mini"
XAI_DEFAULT_BASE_URL = "https://api.x.ai/v1"
OPENROUTER_DEFAULT_MODEL = "openrouter/auto"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

# ---- Anthropic ----
ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-5"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_API_VERSION = "2023-06-01"
# The messages API requires max_tokens on every request.
ANTHROPIC_DEFAULT_MAX_TOKENS = 1024

# ---- Ollama ----
OLLAMA_DEFAULT_MODEL = "llama3.2"
OLLAMA_DEFAULT_HOST = "http://localhost:11434"

# ---- Shared ----
DEFAULT_TEMPERATURE = 0.7
# Consecutive undecodable payloads tolerated before an exchange fails.
MAX_CONSECUTIVE_DECODE_ERRORS = 3

SUPPORTED_PROVIDERS = (
    "gemini",
    "openai",
    "anthropic",
    "deepseek",
    "openrouter",
    "xai",
    "ollama",
)

__all__ = [
    "GEMINI_DEFAULT_BASE_URL",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_TEMPERATURE",
    "GEMINI_DEFAULT_THINKING_BUDGET",
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_BASE_URL",
    "DEEPSEEK_DEFAULT_MODEL",
    "DEEPSEEK_DEFAULT_BASE_URL",
    "XAI_DEFAULT_MODEL",
    "XAI_DEFAULT_BASE_URL",
    "OPENROUTER_DEFAULT_MODEL",
    "OPENROUTER_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "ANTHROPIC_API_VERSION",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "OLLAMA_DEFAULT_MODEL",
    "OLLAMA_DEFAULT_HOST",
    "DEFAULT_TEMPERATURE",
    "MAX_CONSECUTIVE_DECODE_ERRORS",
    "SUPPORTED_PROVIDERS",
]
