"""Sorted per-metric value distributions, memoized per dataset."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from pystatdb.models import Dataset


logger = logging.getLogger(__name__)

QUALIFIED_MIN_AT_BATS = 300
QUALIFIED_SAMPLE_METRIC = "ab"

_CacheKey = Tuple[str, str]


def sorted_values(values) -> Tuple[float, ...]:
    return tuple(sorted(value for value in values if value is not None))


class PopulationIndex:
    """Cache of ascending value distributions keyed by ``(dataset_id, metric_id)``.

    The qualified distribution only keeps records whose sample metric meets
    ``min_sample`` and is cached separately from the overall one.
    """

    def __init__(
        self,
        *,
        min_sample: float = QUALIFIED_MIN_AT_BATS,
        sample_metric: str = QUALIFIED_SAMPLE_METRIC,
    ):
        self.min_sample = min_sample
        self.sample_metric = sample_metric
        self._overall: Dict[_CacheKey, Tuple[float, ...]] = {}
        self._qualified: Dict[_CacheKey, Tuple[float, ...]] = {}

    def distribution(self, dataset: Dataset, metric_id: str) -> Tuple[float, ...]:
        key = (dataset.dataset_id, metric_id)
        cached = self._overall.get(key)
        if cached is None:
            cached = sorted_values(dataset.values(metric_id))
            self._overall[key] = cached
            logger.debug("Built %s distribution for %s (%d values)", metric_id, dataset.dataset_id, len(cached))
        return cached

    def qualified_distribution(self, dataset: Dataset, metric_id: str) -> Tuple[float, ...]:
        key = (dataset.dataset_id, metric_id)
        cached = self._qualified.get(key)
        if cached is None:
            samples = dataset.values(self.sample_metric)
            values = dataset.values(metric_id)
            cached = sorted_values(
                value
                for value, sample in zip(values, samples)
                if sample is not None and sample >= self.min_sample
            )
            self._qualified[key] = cached
            logger.debug(
                "Built qualified %s distribution for %s (%d values)", metric_id, dataset.dataset_id, len(cached)
            )
        return cached

    def qualified_mean(self, dataset: Dataset, metric_id: str) -> Optional[float]:
        values = self.qualified_distribution(dataset, metric_id)
        if not values:
            return None
        return sum(values) / len(values)

    def invalidate(self, dataset_id: str | None = None) -> None:
        """Drop cached distributions for one dataset, or all of them."""

        if dataset_id is None:
            self._overall.clear()
            self._qualified.clear()
            return
        for cache in (self._overall, self._qualified):
            for key in [key for key in cache if key[0] == dataset_id]:
                del cache[key]
