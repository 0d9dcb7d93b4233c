"""Batch annotation of stored records with feed-derived statistics."""

from .service import (
    BatchSummary,
    annotate_dataset_vaa,
    annotate_dataset_zd_plus,
    annotate_percentiles,
    annotate_vaa,
    annotate_zd_plus,
    run_batch,
)

__all__ = [
    "BatchSummary",
    "annotate_dataset_vaa",
    "annotate_dataset_zd_plus",
    "annotate_percentiles",
    "annotate_vaa",
    "annotate_zd_plus",
    "run_batch",
]
