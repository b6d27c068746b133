"""Typed constructor parameters for adapters created by the factory."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class AdapterParams(BaseModel):
    """Common adapter constructor arguments.

    ``extra`` entries are passed to the adapter as additional keyword
    arguments (config overrides such as ``temperature`` or ``online_check``).
    """

    model_config = ConfigDict(extra="forbid")

    provider: Optional[str] = None
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    extra: Dict[str, Any] = Field(default_factory=dict)


__all__ = ["AdapterParams"]
