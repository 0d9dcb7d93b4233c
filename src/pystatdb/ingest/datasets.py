"""JSON-file player repository: one array of player objects per dataset tier."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pystatdb.config import DatasetTier, get_tier
from pystatdb.models import Dataset, PlayerRecord
from pystatdb.stats.population import PopulationIndex


logger = logging.getLogger(__name__)


class DatasetNotFoundError(FileNotFoundError):
    """Raised when a dataset file is missing or unreadable."""


class DatasetFormatError(ValueError):
    """Raised when a dataset file is not a JSON array of player objects."""


def load_records(path: Path) -> List[PlayerRecord]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DatasetNotFoundError(f"Unable to read dataset file {path}: {exc}") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DatasetFormatError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise DatasetFormatError(f"{path} must contain a JSON array of players")

    records: List[PlayerRecord] = []
    for position, entry in enumerate(payload):
        if not isinstance(entry, dict):
            raise DatasetFormatError(f"{path} entry {position} is not an object")
        records.append(PlayerRecord.from_mapping(entry))
    return records


def load_dataset(path: Path, tier: DatasetTier) -> Dataset:
    return Dataset(tier, load_records(path))


def save_records(path: Path, records: List[PlayerRecord]) -> None:
    payload = [record.to_mapping() for record in records]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


class DatasetRepository:
    """Loads dataset tiers from ``data_dir`` and keeps population caches in step."""

    def __init__(self, data_dir: Path | str, *, population_index: Optional[PopulationIndex] = None):
        self.data_dir = Path(data_dir)
        self.population_index = population_index or PopulationIndex()
        self._datasets: Dict[str, Dataset] = {}

    def path_for(self, dataset_id: str) -> Path:
        return self.data_dir / get_tier(dataset_id).data_file

    def load(self, dataset_id: str) -> Dataset:
        tier = get_tier(dataset_id)
        cached = self._datasets.get(tier.dataset_id)
        if cached is not None:
            return cached
        dataset = load_dataset(self.data_dir / tier.data_file, tier)
        self._datasets[tier.dataset_id] = dataset
        logger.info("Loaded %d players for %s", len(dataset), tier.dataset_id)
        return dataset

    def reload(self, dataset_id: str) -> Dataset:
        tier = get_tier(dataset_id)
        self._datasets.pop(tier.dataset_id, None)
        self.population_index.invalidate(tier.dataset_id)
        return self.load(tier.dataset_id)

    def save(self, dataset: Dataset) -> Path:
        path = self.data_dir / dataset.tier.data_file
        save_records(path, list(dataset.records))
        self._datasets[dataset.dataset_id] = dataset
        self.population_index.invalidate(dataset.dataset_id)
        logger.info("Wrote %d players to %s", len(dataset), path)
        return path
