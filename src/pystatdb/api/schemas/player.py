from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel


class DatasetResponse(BaseModel):
    dataset_id: str
    name: str
    data_file: str
    percentile_metrics: List[str]
    similarity_metrics: List[str]
    similarity_weights: Dict[str, float]


class PlayerSummary(BaseModel):
    player_id: int | None
    full_name: str
    team: str | None = None


class PercentileEntry(BaseModel):
    metric: str
    label: str
    value: float | None
    percentile: int | None
    rating: str
    display: str


class PlayerPercentilesResponse(BaseModel):
    dataset_id: str
    player: PlayerSummary
    percentiles: List[PercentileEntry]
    decision_plus: int | None
    zd_plus: int | None = None


class LeaderboardEntry(BaseModel):
    rank: int
    player: PlayerSummary
    decision_plus: int | None
    ab: float | None = None
    pa: float | None = None


class LeaderboardResponse(BaseModel):
    dataset_id: str
    league_zone_swing: float | None
    league_chase: float | None
    entries: List[LeaderboardEntry]
