"""Dataset tier configuration: tracked metrics and similarity weights per population."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .metrics import MetricDefinition, get_metric


class UnknownTierError(KeyError):
    """Raised when a dataset id has no configured tier."""


SWING_DECISION_METRICS: Tuple[str, ...] = ("z-swing%", "z-whiff%", "chase%", "o-whiff%")

_MLB_PERCENTILE_METRICS: Tuple[str, ...] = (
    "bat_speed",
    "fast_swing_%",
    "swing_length",
    "ideal_angle_%",
    "avg_ev",
    "max_ev",
    "barrel_%",
    "hard_hit%",
    "ev50",
    "z-swing%",
    "z-whiff%",
    "chase%",
    "o-whiff%",
    "pull_air%",
)

_MILB_PERCENTILE_METRICS: Tuple[str, ...] = (
    "avg_ev",
    "max_ev",
    "barrel_%",
    "hard_hit%",
    "ev50",
    "z-swing%",
    "z-whiff%",
    "chase%",
    "o-whiff%",
    "pull_air%",
    "bb%",
    "k%",
)

_NCAA_PERCENTILE_METRICS: Tuple[str, ...] = (
    "avg_ev",
    "max_ev",
    "z-swing%",
    "z-whiff%",
    "chase%",
    "bb%",
    "k%",
)


@dataclass(frozen=True)
class DatasetTier:
    dataset_id: str
    name: str
    data_file: str
    percentile_metrics: Tuple[str, ...]
    similarity_metrics: Tuple[str, ...] = SWING_DECISION_METRICS
    similarity_weights: Mapping[str, float] = field(default_factory=dict)

    @property
    def metric_definitions(self) -> Tuple[MetricDefinition, ...]:
        return tuple(get_metric(metric_id) for metric_id in self.percentile_metrics)

    def weight_for(self, metric_id: str) -> float:
        return float(self.similarity_weights.get(metric_id, 1.0))


_TIERS: Dict[str, DatasetTier] = {
    "mlb2025": DatasetTier(
        dataset_id="mlb2025",
        name="MLB 2025",
        data_file="players.json",
        percentile_metrics=_MLB_PERCENTILE_METRICS,
        similarity_metrics=(*SWING_DECISION_METRICS, "bat_speed", "avg_la"),
        similarity_weights={"bat_speed": 4.0, "avg_la": 4.0},
    ),
    "aaa2025": DatasetTier(
        dataset_id="aaa2025",
        name="AAA 2025",
        data_file="players2.json",
        percentile_metrics=_MILB_PERCENTILE_METRICS,
        similarity_metrics=(*SWING_DECISION_METRICS, "max_ev", "avg_la"),
        similarity_weights={"avg_la": 4.0},
    ),
    "aa2025": DatasetTier(
        dataset_id="aa2025",
        name="AA 2025",
        data_file="players3.json",
        percentile_metrics=_MILB_PERCENTILE_METRICS,
    ),
    "aplus2025": DatasetTier(
        dataset_id="aplus2025",
        name="A+ 2025",
        data_file="players4.json",
        percentile_metrics=_MILB_PERCENTILE_METRICS,
    ),
    "a2025": DatasetTier(
        dataset_id="a2025",
        name="A 2025",
        data_file="players5.json",
        percentile_metrics=_MILB_PERCENTILE_METRICS,
        similarity_metrics=(*SWING_DECISION_METRICS, "avg_la", "max_ev"),
        similarity_weights={"avg_la": 3.5, "max_ev": 2.5, "o-whiff%": 0.5},
    ),
    "ncaa2025": DatasetTier(
        dataset_id="ncaa2025",
        name="NCAA 2025",
        data_file="players6.json",
        percentile_metrics=_NCAA_PERCENTILE_METRICS,
    ),
}

DEFAULT_DATASET_ID = "mlb2025"


def iter_tiers() -> Iterable[DatasetTier]:
    """Return an iterator of all configured dataset tiers."""

    return _TIERS.values()


def get_tier(dataset_id: str) -> DatasetTier:
    """Fetch the tier for a dataset id, raising UnknownTierError if missing."""

    key = dataset_id.lower()
    if key not in _TIERS:
        raise UnknownTierError(f"No dataset tier configured for {dataset_id!r}")
    return _TIERS[key]


def get_tier_by_file(data_file: str) -> DatasetTier:
    for tier in _TIERS.values():
        if tier.data_file == data_file:
            return tier
    raise UnknownTierError(f"No dataset tier reads {data_file!r}")


def resolve_tier(dataset_id: Optional[str] = None) -> DatasetTier:
    """Resolve a tier, falling back to the default dataset for unknown or empty ids."""

    if dataset_id:
        try:
            return get_tier(dataset_id)
        except UnknownTierError:
            pass
    return _TIERS[DEFAULT_DATASET_ID]
