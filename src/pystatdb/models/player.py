"""Canonical player records shared across datasets, analytics and annotation."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from pystatdb.config.metrics import numeric_value


def _coerce_player_id(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        text = raw.strip()
        return int(text) if text.isdigit() else None
    return None


def _display_name(raw: Mapping[str, Any]) -> str:
    full_name = raw.get("full_name") or raw.get("name")
    if isinstance(full_name, str) and full_name.strip():
        return full_name.strip()
    parts = [raw.get("first_name"), raw.get("last_name")]
    return " ".join(part.strip() for part in parts if isinstance(part, str) and part.strip())


class PlayerRecord(BaseModel):
    """Sparse player payload: identity plus every stored field, numeric or not."""

    player_id: Optional[int] = None
    full_name: str = ""
    attributes: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "PlayerRecord":
        return cls(
            player_id=_coerce_player_id(raw.get("player_id")),
            full_name=_display_name(raw),
            attributes=dict(raw),
        )

    def value(self, key: str) -> Optional[float]:
        return numeric_value(self.attributes.get(key))

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def with_fields(self, **updates: Any) -> "PlayerRecord":
        """Return a copy with ``updates`` merged over the stored fields."""

        return self.model_copy(update={"attributes": {**self.attributes, **updates}})

    def to_mapping(self) -> Dict[str, Any]:
        """Return the record in its storage shape."""

        return dict(self.attributes)

    def same_player(self, other: "PlayerRecord") -> bool:
        if self.player_id is not None and other.player_id is not None:
            return self.player_id == other.player_id
        return bool(self.full_name) and self.full_name == other.full_name
