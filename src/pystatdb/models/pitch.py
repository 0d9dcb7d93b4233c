"""Per-pitch samples supplied by the external tracking feed."""

from __future__ import annotations

from typing import FrozenSet, Optional

from pydantic import BaseModel
from pydantic.config import ConfigDict

SWING_DESCRIPTIONS: FrozenSet[str] = frozenset(
    {
        "swinging_strike",
        "foul",
        "hit_into_play",
        "foul_tip",
        "swinging_strike_blocked",
        "bunt_foul_tip",
        "missed_bunt",
    }
)

CONTACT_DESCRIPTIONS: FrozenSet[str] = frozenset({"foul", "hit_into_play", "foul_tip", "bunt_foul_tip"})

IN_PLAY_DESCRIPTION = "hit_into_play"

IN_ZONE_BUCKETS = tuple(range(1, 10))
OUT_OF_ZONE_BUCKETS = tuple(range(11, 20))


class PitchEvent(BaseModel):
    zone: Optional[int] = None
    description: str = ""
    estimated_woba: Optional[float] = None
    vy0: Optional[float] = None
    vz0: Optional[float] = None
    ay: Optional[float] = None
    az: Optional[float] = None
    pitch_type: Optional[str] = None
    pitcher_id: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_swing(self) -> bool:
        return self.description in SWING_DESCRIPTIONS

    @property
    def is_contact(self) -> bool:
        return self.description in CONTACT_DESCRIPTIONS

    @property
    def in_play_quality(self) -> Optional[float]:
        """Contact-quality estimate, only meaningful for balls in play."""

        if self.description != IN_PLAY_DESCRIPTION:
            return None
        return self.estimated_woba

    @property
    def in_zone(self) -> bool:
        return self.zone is not None and 1 <= self.zone <= 9

    @property
    def out_of_zone(self) -> bool:
        return self.zone is not None and 11 <= self.zone <= 19
