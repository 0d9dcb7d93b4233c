"""Record models shared across ingestion, analytics and the API."""

from .dataset import Dataset, canonical_vector
from .pitch import PitchEvent
from .player import PlayerRecord

__all__ = ["Dataset", "PitchEvent", "PlayerRecord", "canonical_vector"]
