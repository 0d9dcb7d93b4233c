"""Zone-Discipline-Plus (ZD+) and the per-zone contact breakdown behind it.

Every in-zone pitch is scored against the location's expected contact value.
When a batter's mean xwOBA on balls in play from a zone beats the league
baseline for that zone, swings there earn ``(xwOBA - baseline) * 1000``
points and takes lose the same amount; below baseline the signs flip. The
per-pitch average is scaled to a 100-centered index with a 15 point spread,
then nudged by how often out-of-zone pitches are taken versus chased.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from pystatdb.models import PitchEvent
from pystatdb.models.pitch import IN_ZONE_BUCKETS

from .percentiles import round_half_up

ZONE_BASELINE: Mapping[int, float] = {
    1: 0.3413, 2: 0.3851, 3: 0.3512,
    4: 0.3810, 5: 0.4348, 6: 0.3832,
    7: 0.3570, 8: 0.4106, 9: 0.3551,
}

MIN_ZONE_IN_PLAY = 5
MIN_COVERED_PITCHES = 50
MIN_RATE_SAMPLE = 5

LEAGUE_MEAN = 0.0
LEAGUE_STDEV = 30.0
INDEX_SPREAD = 15.0

OOZ_MIN_PITCHES = 10
OOZ_TAKE_POINTS = 60.0
OOZ_CHASE_POINTS = 40.0
OOZ_LEAGUE_AVG_RAW = 0.72 * OOZ_TAKE_POINTS - 0.28 * OOZ_CHASE_POINTS  # 32.0
OOZ_SCALE = 3.0

MIN_OVERALL_XWOBA_SAMPLES = 10


@dataclass
class ZoneBucket:
    zone: int
    pitches: int = 0
    swings: int = 0
    contacts: int = 0
    xwoba_sum: float = 0.0
    xwoba_n: int = 0

    @property
    def takes(self) -> int:
        return self.pitches - self.swings

    @property
    def mean_xwoba(self) -> Optional[float]:
        if self.xwoba_n == 0:
            return None
        return self.xwoba_sum / self.xwoba_n

    @property
    def qualifies(self) -> bool:
        return self.xwoba_n >= MIN_ZONE_IN_PLAY

    @property
    def swing_pct(self) -> Optional[float]:
        if self.pitches < MIN_RATE_SAMPLE:
            return None
        return round(self.swings / self.pitches * 100, 1)

    @property
    def contact_pct(self) -> Optional[float]:
        if self.swings < MIN_RATE_SAMPLE:
            return None
        return round(self.contacts / self.swings * 100, 1)

    def to_dict(self) -> Dict[str, object]:
        xwoba = self.mean_xwoba if self.qualifies else None
        return {
            "zone": self.zone,
            "pitches": self.pitches,
            "swings": self.swings,
            "contacts": self.contacts,
            "swing_pct": self.swing_pct,
            "contact_pct": self.contact_pct,
            "xwoba": round(xwoba, 3) if xwoba is not None else None,
            "xwoba_n": self.xwoba_n,
        }


@dataclass
class ZoneTally:
    buckets: Dict[int, ZoneBucket] = field(default_factory=lambda: {z: ZoneBucket(z) for z in IN_ZONE_BUCKETS})
    ooz_swings: int = 0
    ooz_takes: int = 0
    in_play_xwoba_sum: float = 0.0
    in_play_xwoba_n: int = 0

    @property
    def ooz_pitches(self) -> int:
        return self.ooz_swings + self.ooz_takes

    @property
    def zone_pitches(self) -> int:
        return sum(bucket.pitches for bucket in self.buckets.values())


def tally_pitches(events: Iterable[PitchEvent]) -> ZoneTally:
    tally = ZoneTally()
    for event in events:
        quality = event.in_play_quality
        if quality is not None:
            tally.in_play_xwoba_sum += quality
            tally.in_play_xwoba_n += 1

        if event.in_zone:
            bucket = tally.buckets[event.zone]
            bucket.pitches += 1
            if event.is_swing:
                bucket.swings += 1
                if event.is_contact:
                    bucket.contacts += 1
            if quality is not None:
                bucket.xwoba_sum += quality
                bucket.xwoba_n += 1
        elif event.out_of_zone:
            if event.is_swing:
                tally.ooz_swings += 1
            else:
                tally.ooz_takes += 1
    return tally


def zone_points(tally: ZoneTally) -> tuple[float, int]:
    """Total decision points and the pitch count of the zones that scored."""

    total_points = 0.0
    covered_pitches = 0
    for zone, bucket in tally.buckets.items():
        if not bucket.qualifies:
            continue
        diff_points = (bucket.mean_xwoba - ZONE_BASELINE[zone]) * 1000
        total_points += diff_points * bucket.swings + (-diff_points) * bucket.takes
        covered_pitches += bucket.pitches
    return total_points, covered_pitches


def out_of_zone_adjustment(tally: ZoneTally) -> float:
    total = tally.ooz_pitches
    if total < OOZ_MIN_PITCHES:
        return 0.0
    raw = (tally.ooz_takes * OOZ_TAKE_POINTS - tally.ooz_swings * OOZ_CHASE_POINTS) / total
    return (raw - OOZ_LEAGUE_AVG_RAW) / OOZ_SCALE


def raw_per_pitch(tally: ZoneTally) -> Optional[float]:
    total_points, covered_pitches = zone_points(tally)
    if covered_pitches < MIN_COVERED_PITCHES:
        return None
    return total_points / covered_pitches


def zd_plus_from_tally(tally: ZoneTally) -> Optional[int]:
    per_pitch = raw_per_pitch(tally)
    if per_pitch is None:
        return None
    scaled = ((per_pitch - LEAGUE_MEAN) / LEAGUE_STDEV) * INDEX_SPREAD
    return round_half_up(100 + scaled + out_of_zone_adjustment(tally))


def zd_plus(events: Iterable[PitchEvent]) -> Optional[int]:
    return zd_plus_from_tally(tally_pitches(events))


def overall_xwoba(tally: ZoneTally) -> Optional[float]:
    if tally.in_play_xwoba_n < MIN_OVERALL_XWOBA_SAMPLES:
        return None
    return round_half_up(tally.in_play_xwoba_sum / tally.in_play_xwoba_n * 1000) / 1000


@dataclass(frozen=True)
class ZoneContactSummary:
    zones: List[Dict[str, object]]
    zd_plus: Optional[int]
    zd_raw: Optional[float]
    xwoba: Optional[float]
    pitch_count: int


def zone_contact_summary(events: Iterable[PitchEvent]) -> ZoneContactSummary:
    tally = tally_pitches(events)
    per_pitch = raw_per_pitch(tally)
    return ZoneContactSummary(
        zones=[tally.buckets[zone].to_dict() for zone in IN_ZONE_BUCKETS],
        zd_plus=zd_plus_from_tally(tally),
        zd_raw=round(per_pitch, 1) if per_pitch is not None else None,
        xwoba=overall_xwoba(tally),
        pitch_count=tally.zone_pitches,
    )
