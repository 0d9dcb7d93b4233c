from __future__ import annotations

from typing import List

from pydantic import BaseModel


class ZoneBucketResponse(BaseModel):
    zone: int
    pitches: int
    swings: int
    contacts: int
    swing_pct: float | None
    contact_pct: float | None
    xwoba: float | None
    xwoba_n: int


class ZoneContactResponse(BaseModel):
    player_id: int
    season: int
    zones: List[ZoneBucketResponse]
    zd_plus: int | None
    zd_raw: float | None
    xwoba: float | None
    pitch_count: int
