"""OpenRouterProvider adapter package."""

from .client import OpenRouterProvider

__all__ = ["OpenRouterProvider"]
