from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from .player import PlayerSummary


class SimilarityRequest(BaseModel):
    metrics: Dict[str, float | None]
    weights: Dict[str, float] | None = None
    limit: int = Field(default=10, ge=1, le=100)


class MetricDifference(BaseModel):
    metric: str
    target: float | None
    candidate: float | None
    difference: float | None


class SimilarPlayerResponse(BaseModel):
    player: PlayerSummary
    distance: float
    overlap: int
    differences: List[MetricDifference] = Field(default_factory=list)


class SimilarityResponse(BaseModel):
    dataset_id: str
    metrics: List[str]
    weights: Dict[str, float]
    results: List[SimilarPlayerResponse]
