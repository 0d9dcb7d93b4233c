"""Direction-aware percentile ranks against a dataset population."""

from __future__ import annotations

import math
from bisect import bisect_right
from typing import Dict, Optional, Sequence

from pystatdb.config import MetricDefinition, get_metric
from pystatdb.models import Dataset, PlayerRecord

from .population import PopulationIndex


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentile(value: Optional[float], sorted_population: Sequence[float]) -> Optional[int]:
    """Share of the population at or below ``value``, as a whole-number percent.

    Equal values all land in the same bucket: the count is inclusive and ties
    are never rank-averaged.
    """

    if value is None or not sorted_population:
        return None
    count = bisect_right(sorted_population, value)
    return round_half_up(100 * count / len(sorted_population))


def directional_percentile(
    definition: MetricDefinition,
    value: Optional[float],
    sorted_population: Sequence[float],
) -> Optional[int]:
    raw = percentile(value, sorted_population)
    if raw is None:
        return None
    if definition.lower_is_better:
        return 100 - raw
    return raw


def player_percentiles(
    player: PlayerRecord,
    dataset: Dataset,
    index: PopulationIndex,
) -> Dict[str, Optional[int]]:
    """Percentiles for every metric the dataset tier tracks."""

    percentiles: Dict[str, Optional[int]] = {}
    for definition in dataset.tier.metric_definitions:
        value = definition.value_of(player.attributes)
        population = index.distribution(dataset, definition.metric_id)
        percentiles[definition.metric_id] = directional_percentile(definition, value, population)
    return percentiles


def percentile_label(value: Optional[int]) -> str:
    if value is None:
        return "N/A"
    if value >= 90:
        return "Elite"
    if value >= 75:
        return "Great"
    if value >= 50:
        return "Above Avg"
    if value >= 25:
        return "Below Avg"
    return "Poor"


def format_percentile(value: Optional[int]) -> str:
    if value is None:
        return "N/A"
    return f"{value}th"


def metric_difference(target: PlayerRecord, other: PlayerRecord, metric_id: str) -> Optional[float]:
    """``other - target`` for one canonical metric, or None when either is missing."""

    definition = get_metric(metric_id)
    target_value = definition.value_of(target.attributes)
    other_value = definition.value_of(other.attributes)
    if target_value is None or other_value is None:
        return None
    return other_value - target_value
