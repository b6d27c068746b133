"""
ModelInfo DTO for provider model listings.

A catalog entry as shown in a model picker: identifier, optional display label
and the alternative identifiers the entry answers to.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class ModelInfo:
    """A single model listing entry.

    Attributes:
        id: Model identifier sent to the backend.
        label: Human-friendly display name, if the catalog has one.
        aliases: Alternative identifiers (the identifier itself for static
            catalog entries).
    """

    id: str
    label: Optional[str] = None
    aliases: List[str] = field(default_factory=list)

    @classmethod
    def from_catalog_entry(cls, entry: Mapping[str, Any]) -> "ModelInfo":
        model_id = str(entry["id"])
        aliases = [str(a) for a in entry.get("aliases") or [model_id]]
        return cls(id=model_id, label=entry.get("label"), aliases=aliases)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the entry."""
        return asdict(self)


__all__ = ["ModelInfo"]
