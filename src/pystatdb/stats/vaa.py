"""Vertical Approach Angle from pitch trajectory coefficients."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from pystatdb.models import PitchEvent


logger = logging.getLogger(__name__)

Y0 = 50.0  # tracking measurement point, feet from the plate
YF = 17.0 / 12.0  # front edge of home plate
VAA_MIN = -15.0
VAA_MAX = 5.0

PITCH_TYPE_CODES: Tuple[str, ...] = ("ff", "si", "fc", "sl", "ch", "cu", "fs", "st", "sv", "kc")


def vertical_approach_angle(vy0: float, vz0: float, ay: float, az: float) -> Optional[float]:
    """Approach angle in degrees at the front of the plate, or None for unusable samples."""

    radicand = vy0 * vy0 - 2 * ay * (Y0 - YF)
    if radicand < 0 or ay == 0:
        return None
    vy_f = -math.sqrt(radicand)
    if vy_f == 0:
        return None
    t = (vy_f - vy0) / ay
    vz_f = vz0 + az * t
    vaa = -math.atan(vz_f / vy_f) * (180 / math.pi)
    if not math.isfinite(vaa) or vaa < VAA_MIN or vaa > VAA_MAX:
        return None
    return vaa


def event_vaa(event: PitchEvent) -> Optional[float]:
    if event.vy0 is None or event.vz0 is None or event.ay is None or event.az is None:
        return None
    return vertical_approach_angle(event.vy0, event.vz0, event.ay, event.az)


@dataclass
class VaaAccumulator:
    total: float = 0.0
    count: int = 0

    def add(self, value: float) -> None:
        self.total += value
        self.count += 1

    @property
    def mean(self) -> Optional[float]:
        if self.count == 0:
            return None
        return self.total / self.count


def accumulate_vaa(events: Iterable[PitchEvent]) -> Dict[Tuple[Optional[int], str], VaaAccumulator]:
    """Valid VAA samples grouped by ``(pitcher_id, pitch type code)``."""

    accum: Dict[Tuple[Optional[int], str], VaaAccumulator] = defaultdict(VaaAccumulator)
    discarded = 0
    for event in events:
        if not event.pitch_type:
            continue
        vaa = event_vaa(event)
        if vaa is None:
            discarded += 1
            continue
        accum[(event.pitcher_id, event.pitch_type.lower())].add(vaa)
    if discarded:
        logger.debug("Discarded %d pitches without a usable trajectory", discarded)
    return dict(accum)


def mean_vaa_by_pitch_type(events: Iterable[PitchEvent]) -> Dict[str, float]:
    """Mean VAA per pitch type code for a single pitcher's events."""

    merged: Dict[str, VaaAccumulator] = defaultdict(VaaAccumulator)
    for (_, code), accumulator in accumulate_vaa(events).items():
        merged[code].total += accumulator.total
        merged[code].count += accumulator.count
    return {code: accumulator.mean for code, accumulator in merged.items() if accumulator.count}
