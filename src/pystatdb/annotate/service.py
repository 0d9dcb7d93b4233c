"""Offline annotation of stored player records with derived statistics.

Each ``annotate_*`` function takes one record and returns a new record; the
same inputs always produce the same output, so re-running a batch is safe.
``run_batch`` drives them strictly one record at a time with a pause between
feed requests and isolates per-record failures.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from pystatdb.ingest.feed import TrackingFeedError
from pystatdb.models import Dataset, PitchEvent, PlayerRecord
from pystatdb.stats.percentiles import player_percentiles
from pystatdb.stats.population import PopulationIndex
from pystatdb.stats.vaa import PITCH_TYPE_CODES, mean_vaa_by_pitch_type
from pystatdb.stats.zone import overall_xwoba, tally_pitches, zd_plus_from_tally


logger = logging.getLogger(__name__)

VAA_DECIMALS = 2


class PitchFeed(Protocol):
    def batter_pitches(self, player_id: int, *, season: int | None = None) -> List[PitchEvent]:
        ...

    def pitcher_pitches(self, player_id: int, *, season: int | None = None) -> List[PitchEvent]:
        ...


@dataclass
class BatchSummary:
    total: int = 0
    processed: int = 0
    populated: int = 0
    empty: int = 0
    errors: int = 0
    skipped: int = 0
    cancelled: bool = False

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "processed": self.processed,
            "populated": self.populated,
            "empty": self.empty,
            "errors": self.errors,
            "skipped": self.skipped,
            "cancelled": self.cancelled,
        }


def annotate_zd_plus(record: PlayerRecord, feed: PitchFeed, *, season: int | None = None) -> PlayerRecord:
    """Attach ``zd_plus`` and ``xwoba`` computed from the batter's pitch feed."""

    if record.player_id is None:
        return record
    tally = tally_pitches(feed.batter_pitches(record.player_id, season=season))
    score = zd_plus_from_tally(tally)
    # both fields are null together when zone coverage is too thin
    xwoba = overall_xwoba(tally) if score is not None else None
    return record.with_fields(zd_plus=score, xwoba=xwoba)


def annotate_vaa(record: PlayerRecord, feed: PitchFeed, *, season: int | None = None) -> PlayerRecord:
    """Set ``vaa`` on each stored pitch-type object that has valid samples."""

    if record.player_id is None:
        return record
    events = [
        event
        for event in feed.pitcher_pitches(record.player_id, season=season)
        if event.pitcher_id is None or event.pitcher_id == record.player_id
    ]
    means = mean_vaa_by_pitch_type(events)
    updates = {}
    for code in PITCH_TYPE_CODES:
        pitch = record.get(code)
        mean = means.get(code)
        if not isinstance(pitch, dict) or mean is None:
            continue
        updates[code] = {**pitch, "vaa": round(mean, VAA_DECIMALS)}
    if not updates:
        return record
    return record.with_fields(**updates)


def annotate_percentiles(dataset: Dataset, index: PopulationIndex) -> Dataset:
    """Return the dataset with every record carrying its ``percentiles`` map."""

    annotated = [
        record.with_fields(percentiles=player_percentiles(record, dataset, index))
        for record in dataset.records
    ]
    return dataset.replace_records(annotated)


def _zd_populated(record: PlayerRecord) -> bool:
    return record.get("zd_plus") is not None


def run_batch(
    records: Sequence[PlayerRecord],
    annotate: Callable[[PlayerRecord], PlayerRecord],
    *,
    delay: float,
    populated: Callable[[PlayerRecord], bool] = _zd_populated,
    sleep: Callable[[float], None] = time.sleep,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> Tuple[List[PlayerRecord], BatchSummary]:
    """Annotate ``records`` sequentially.

    Records without a ``player_id`` are skipped. A record whose fetch or parse
    fails is kept as-is and counted in ``errors``. When ``should_cancel``
    returns True, or the run is interrupted with Ctrl-C, the records already
    annotated are kept and the remaining ones are returned untouched.
    """

    results = list(records)
    eligible = [position for position, record in enumerate(results) if record.player_id is not None]
    summary = BatchSummary(total=len(results), skipped=len(results) - len(eligible))
    logger.info(
        "Annotating %d/%d records with %.2fs between requests", len(eligible), len(results), delay
    )

    try:
        for step, position in enumerate(eligible):
            if should_cancel is not None and should_cancel():
                summary.cancelled = True
                logger.warning("Batch cancelled after %d/%d records", step, len(eligible))
                break

            record = results[position]
            try:
                updated = annotate(record)
            except (TrackingFeedError, ValueError) as exc:
                summary.errors += 1
                logger.warning("Record %s (%s) left unchanged: %s", record.player_id, record.full_name, exc)
            else:
                results[position] = updated
                if populated(updated):
                    summary.populated += 1
                else:
                    summary.empty += 1
                logger.info("[%d/%d] %s annotated", step + 1, len(eligible), record.full_name or record.player_id)
            summary.processed += 1

            if step < len(eligible) - 1 and delay > 0:
                sleep(delay)
    except KeyboardInterrupt:
        summary.cancelled = True
        logger.warning("Batch interrupted after %d/%d records", summary.processed, len(eligible))

    logger.info(
        "Batch finished: populated=%d empty=%d errors=%d skipped=%d",
        summary.populated,
        summary.empty,
        summary.errors,
        summary.skipped,
    )
    return results, summary


def annotate_dataset_zd_plus(
    dataset: Dataset,
    feed: PitchFeed,
    *,
    delay: float,
    season: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> Tuple[Dataset, BatchSummary]:
    records, summary = run_batch(
        dataset.records,
        lambda record: annotate_zd_plus(record, feed, season=season),
        delay=delay,
        sleep=sleep,
        should_cancel=should_cancel,
    )
    return dataset.replace_records(records), summary


def annotate_dataset_vaa(
    dataset: Dataset,
    feed: PitchFeed,
    *,
    delay: float,
    season: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> Tuple[Dataset, BatchSummary]:
    originals = {record.player_id: record for record in dataset.records}
    records, summary = run_batch(
        dataset.records,
        lambda record: annotate_vaa(record, feed, season=season),
        delay=delay,
        populated=lambda record: record is not originals.get(record.player_id),
        sleep=sleep,
        should_cancel=should_cancel,
    )
    return dataset.replace_records(records), summary
