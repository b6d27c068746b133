"""OpenAI-compatible adapter base and wire helpers."""

from .base import OpenAIStyleProvider

__all__ = ["OpenAIStyleProvider"]
