"""Pydantic models for API I/O."""

from .player import (
    DatasetResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    PercentileEntry,
    PlayerPercentilesResponse,
    PlayerSummary,
)
from .similarity import MetricDifference, SimilarityRequest, SimilarityResponse, SimilarPlayerResponse
from .zone import ZoneBucketResponse, ZoneContactResponse

__all__ = [
    "DatasetResponse",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "MetricDifference",
    "PercentileEntry",
    "PlayerPercentilesResponse",
    "PlayerSummary",
    "SimilarPlayerResponse",
    "SimilarityRequest",
    "SimilarityResponse",
    "ZoneBucketResponse",
    "ZoneContactResponse",
]
