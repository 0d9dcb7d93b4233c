"""Dataset container binding player records to one population tier."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from pystatdb.config import DatasetTier, iter_metrics
from pystatdb.config.metrics import get_metric

from .player import PlayerRecord


def canonical_vector(record: PlayerRecord, metric_ids: Iterable[str]) -> Dict[str, Optional[float]]:
    """Resolve ``metric_ids`` on ``record`` through the alias table."""

    return {metric_id: get_metric(metric_id).value_of(record.attributes) for metric_id in metric_ids}


class Dataset:
    """Ordered player records for one population.

    Every configured metric is resolved through its alias keys once, when the
    dataset is built, so downstream code only ever sees canonical metric ids.
    """

    def __init__(self, tier: DatasetTier, records: Sequence[PlayerRecord], *, dataset_id: str | None = None):
        self.tier = tier
        self.dataset_id = dataset_id or tier.dataset_id
        self.records: Tuple[PlayerRecord, ...] = tuple(records)
        metric_ids = [definition.metric_id for definition in iter_metrics()]
        self._rows: List[Dict[str, Optional[float]]] = [
            canonical_vector(record, metric_ids) for record in self.records
        ]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[PlayerRecord]:
        return iter(self.records)

    def values(self, metric_id: str) -> Tuple[Optional[float], ...]:
        """Canonical values for ``metric_id`` aligned with ``records``."""

        get_metric(metric_id)
        return tuple(row.get(metric_id) for row in self._rows)

    def vector_at(self, index: int) -> Dict[str, Optional[float]]:
        return dict(self._rows[index])

    def find(self, player_id: int) -> Optional[PlayerRecord]:
        for record in self.records:
            if record.player_id == player_id:
                return record
        return None

    def replace_records(self, records: Sequence[PlayerRecord]) -> "Dataset":
        return Dataset(self.tier, records, dataset_id=self.dataset_id)
