"""Canonical metric definitions shared by every dataset tier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Literal, Mapping, Optional, Tuple

Direction = Literal["higher-is-better", "lower-is-better"]

HIGHER_IS_BETTER: Direction = "higher-is-better"
LOWER_IS_BETTER: Direction = "lower-is-better"


def numeric_value(raw: Any) -> Optional[float]:
    """Return ``raw`` as a float when it is a real number, otherwise ``None``."""

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        if value != value:  # NaN
            return None
        return value
    return None


@dataclass(frozen=True)
class MetricDefinition:
    metric_id: str
    label: str
    direction: Direction = HIGHER_IS_BETTER
    aliases: Tuple[str, ...] = ()

    @property
    def keys(self) -> Tuple[str, ...]:
        return (self.metric_id, *self.aliases)

    @property
    def lower_is_better(self) -> bool:
        return self.direction == LOWER_IS_BETTER

    def resolve_key(self, fields: Mapping[str, Any]) -> Optional[str]:
        """Return the first key under which ``fields`` exposes this metric."""

        for key in self.keys:
            if key in fields:
                return key
        return None

    def value_of(self, fields: Mapping[str, Any]) -> Optional[float]:
        for key in self.keys:
            value = numeric_value(fields.get(key))
            if value is not None:
                return value
        return None


_METRICS: Dict[str, MetricDefinition] = {
    definition.metric_id: definition
    for definition in (
        MetricDefinition("bat_speed", "Bat Speed"),
        MetricDefinition("fast_swing_%", "Fast Swing %", aliases=("fast_swing_rate",)),
        MetricDefinition("swing_length", "Swing Length", LOWER_IS_BETTER),
        MetricDefinition("ideal_angle_%", "Ideal Attack Angle %", aliases=("ideal_attack_angle_rate",)),
        MetricDefinition("avg_ev", "Avg EV", aliases=("avg_exit_velocity", "exit_velocity_avg")),
        MetricDefinition("max_ev", "Max EV", aliases=("max_exit_velocity", "exit_velocity_max")),
        MetricDefinition("avg_la", "Avg LA", aliases=("avg_launch_angle", "launch_angle_avg")),
        MetricDefinition("barrel_%", "Barrel %", aliases=("barrel_percent", "barrel_batted_rate")),
        MetricDefinition("hard_hit%", "Hard Hit %", aliases=("hard_hit_percent",)),
        MetricDefinition("ev50", "EV50"),
        MetricDefinition("z-swing%", "Z-Swing %", aliases=("zone_swing_percent", "z_swing_percent")),
        MetricDefinition("z-whiff%", "Z-Whiff %", LOWER_IS_BETTER, aliases=("zone_whiff_percent", "z_whiff_percent")),
        MetricDefinition("chase%", "Chase %", LOWER_IS_BETTER, aliases=("chase_percent", "o_swing_percent")),
        MetricDefinition("o-whiff%", "O-Whiff %", LOWER_IS_BETTER, aliases=("o_whiff_percent",)),
        MetricDefinition("pull_air%", "Pull Air %", aliases=("pull_air_percent",)),
        MetricDefinition("bb%", "BB %", aliases=("bb_percent",)),
        MetricDefinition("k%", "K %", LOWER_IS_BETTER, aliases=("k_percent",)),
        MetricDefinition("ab", "AB", aliases=("at_bats",)),
        MetricDefinition("pa", "PA", aliases=("plate_appearances",)),
    )
}


def iter_metrics() -> Iterable[MetricDefinition]:
    return _METRICS.values()


def get_metric(metric_id: str) -> MetricDefinition:
    """Fetch a metric definition, raising KeyError if it is not configured."""

    if metric_id not in _METRICS:
        raise KeyError(f"No metric configured for {metric_id!r}")
    return _METRICS[metric_id]
