"""Weighted nearest-neighbor search over sparse metric vectors."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pystatdb.models import Dataset, PlayerRecord, canonical_vector

MIN_OVERLAPPING_METRICS = 3
DEFAULT_LIMIT = 5

Vector = Mapping[str, Optional[float]]


@dataclass(frozen=True)
class SimilarityResult:
    player: PlayerRecord
    distance: float
    overlap: int


@dataclass(frozen=True)
class SimilarityQuery:
    """Partial target vector plus an optional weight table.

    ``weights`` of ``None`` means the dataset tier's configured weights apply;
    metrics missing from an explicit table weigh 1.
    """

    target: PlayerRecord
    metrics: Tuple[str, ...]
    weights: Optional[Mapping[str, float]] = None
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_values(
        cls,
        values: Mapping[str, Optional[float]],
        *,
        metrics: Sequence[str] | None = None,
        weights: Mapping[str, float] | None = None,
        limit: int = DEFAULT_LIMIT,
        name: str = "Custom Search",
    ) -> "SimilarityQuery":
        target = PlayerRecord(full_name=name, attributes=dict(values))
        return cls(target=target, metrics=tuple(metrics or values.keys()), weights=weights, limit=limit)


def _validate_weights(weights: Mapping[str, float]) -> None:
    for metric_id, weight in weights.items():
        if weight < 0 or not math.isfinite(weight):
            raise ValueError(f"weight for {metric_id!r} must be a finite non-negative number")


def weighted_distance(
    target: Vector,
    candidate: Vector,
    weights: Mapping[str, float] | None = None,
    *,
    metrics: Iterable[str] | None = None,
) -> Optional[Tuple[float, int]]:
    """Distance and overlap over metrics present in both vectors.

    Returns None when fewer than ``MIN_OVERLAPPING_METRICS`` overlap, so the
    candidate can be dropped instead of ranked.
    """

    weights = weights or {}
    total = 0.0
    overlap = 0
    for metric_id in metrics if metrics is not None else target.keys():
        target_value = target.get(metric_id)
        candidate_value = candidate.get(metric_id)
        if target_value is None or candidate_value is None:
            continue
        diff = target_value - candidate_value
        total += float(weights.get(metric_id, 1.0)) * diff * diff
        overlap += 1
    if overlap < MIN_OVERLAPPING_METRICS:
        return None
    return math.sqrt(total), overlap


def rank_candidates(
    target: PlayerRecord,
    target_vector: Vector,
    candidates: Iterable[Tuple[PlayerRecord, Vector]],
    *,
    metrics: Sequence[str],
    weights: Mapping[str, float],
    limit: int,
) -> List[SimilarityResult]:
    _validate_weights(weights)
    scored: List[SimilarityResult] = []
    for record, vector in candidates:
        if record.same_player(target):
            continue
        outcome = weighted_distance(target_vector, vector, weights, metrics=metrics)
        if outcome is None:
            continue
        distance, overlap = outcome
        scored.append(SimilarityResult(player=record, distance=distance, overlap=overlap))
    scored.sort(key=lambda result: result.distance)
    return scored[: max(limit, 0)]


def find_similar(
    target: PlayerRecord,
    candidates: Iterable[PlayerRecord],
    *,
    metrics: Sequence[str],
    limit: int = DEFAULT_LIMIT,
    weights: Mapping[str, float] | None = None,
) -> List[SimilarityResult]:
    """Most similar candidates to ``target``, closest first."""

    return rank_candidates(
        target,
        canonical_vector(target, metrics),
        ((record, canonical_vector(record, metrics)) for record in candidates),
        metrics=metrics,
        weights=weights or {},
        limit=limit,
    )


def find_similar_in_dataset(
    target: PlayerRecord,
    dataset: Dataset,
    *,
    limit: int = DEFAULT_LIMIT,
    weights: Mapping[str, float] | None = None,
    metrics: Sequence[str] | None = None,
) -> List[SimilarityResult]:
    metrics = tuple(metrics or dataset.tier.similarity_metrics)
    effective: Dict[str, float] = dict(dataset.tier.similarity_weights if weights is None else weights)
    return rank_candidates(
        target,
        canonical_vector(target, metrics),
        ((record, dataset.vector_at(position)) for position, record in enumerate(dataset.records)),
        metrics=metrics,
        weights=effective,
        limit=limit,
    )


def run_query(query: SimilarityQuery, dataset: Dataset) -> List[SimilarityResult]:
    return find_similar_in_dataset(
        query.target,
        dataset,
        limit=query.limit,
        weights=query.weights,
        metrics=query.metrics,
    )
