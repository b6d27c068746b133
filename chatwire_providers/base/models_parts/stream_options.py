"""
Per-exchange generation options.

Known fields are typed; anything else is kept as an extra and forwarded to
the vendor's generation config verbatim, so callers can use vendor options
this layer does not know about.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StreamOptions(BaseModel):
    """Generation options for one ``chat_stream`` call.

    ``None`` means "use the adapter default" (for example the configured
    temperature), never "send null".
    """

    model_config = ConfigDict(extra="allow")

    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_output_tokens: Optional[int] = Field(default=None, gt=0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    thinking_budget: Optional[int] = Field(default=None, ge=0)
    system_instruction: Optional[str] = None

    def extra_options(self) -> Dict[str, Any]:
        """Unknown option keys and their values."""
        return dict(self.model_extra or {})

    @classmethod
    def coerce(cls, options: Union["StreamOptions", Mapping[str, Any], None]) -> "StreamOptions":
        if options is None:
            return cls()
        if isinstance(options, StreamOptions):
            return options
        return cls.model_validate(dict(options))


__all__ = ["StreamOptions"]
