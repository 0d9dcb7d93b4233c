"""Input adapters: the JSON player repository and the pitch-tracking feed."""

from .datasets import (
    DatasetFormatError,
    DatasetNotFoundError,
    DatasetRepository,
    load_dataset,
    load_records,
    save_records,
)
from .feed import TrackingFeedClient, TrackingFeedError, parse_pitch_csv

__all__ = [
    "DatasetFormatError",
    "DatasetNotFoundError",
    "DatasetRepository",
    "TrackingFeedClient",
    "TrackingFeedError",
    "load_dataset",
    "load_records",
    "parse_pitch_csv",
    "save_records",
]
