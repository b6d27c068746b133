"""Ollama adapter package."""

from .client import OllamaProvider

__all__ = ["OllamaProvider"]
