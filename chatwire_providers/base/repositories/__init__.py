"""Read-only repositories used by the adapters."""

from .keys import KeyResolution, KeysRepository

__all__ = ["KeyResolution", "KeysRepository"]
