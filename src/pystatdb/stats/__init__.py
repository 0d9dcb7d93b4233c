"""Dataset-relative analytics: percentiles, composite indices, VAA and similarity."""

from .composite import (
    LeagueDiscipline,
    decision_plus,
    decision_plus_leaderboard,
    league_discipline,
    player_decision_plus,
)
from .percentiles import (
    format_percentile,
    metric_difference,
    percentile,
    percentile_label,
    player_percentiles,
)
from .population import PopulationIndex
from .similarity import (
    SimilarityQuery,
    SimilarityResult,
    find_similar,
    find_similar_in_dataset,
    run_query,
    weighted_distance,
)
from .vaa import mean_vaa_by_pitch_type, vertical_approach_angle
from .zone import ZoneContactSummary, zd_plus, zone_contact_summary

__all__ = [
    "LeagueDiscipline",
    "PopulationIndex",
    "SimilarityQuery",
    "SimilarityResult",
    "ZoneContactSummary",
    "decision_plus",
    "decision_plus_leaderboard",
    "find_similar",
    "find_similar_in_dataset",
    "format_percentile",
    "league_discipline",
    "mean_vaa_by_pitch_type",
    "metric_difference",
    "percentile",
    "percentile_label",
    "player_decision_plus",
    "player_percentiles",
    "run_query",
    "vertical_approach_angle",
    "weighted_distance",
    "zd_plus",
    "zone_contact_summary",
]
