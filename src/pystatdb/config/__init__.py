"""Configuration helpers for metrics, dataset tiers and runtime settings."""

from .metrics import (
    HIGHER_IS_BETTER,
    LOWER_IS_BETTER,
    MetricDefinition,
    get_metric,
    iter_metrics,
    numeric_value,
)
from .settings import Settings
from .tiers import (
    DEFAULT_DATASET_ID,
    DatasetTier,
    UnknownTierError,
    get_tier,
    get_tier_by_file,
    iter_tiers,
    resolve_tier,
)

__all__ = [
    "DEFAULT_DATASET_ID",
    "DatasetTier",
    "HIGHER_IS_BETTER",
    "LOWER_IS_BETTER",
    "MetricDefinition",
    "Settings",
    "UnknownTierError",
    "get_metric",
    "get_tier",
    "get_tier_by_file",
    "iter_metrics",
    "iter_tiers",
    "numeric_value",
    "resolve_tier",
]
