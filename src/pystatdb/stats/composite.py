"""Decision+: plate discipline scaled so that 100 is league average."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from pystatdb.config import get_metric
from pystatdb.models import Dataset, PlayerRecord

from .percentiles import round_half_up
from .population import PopulationIndex

ZONE_SWING_METRIC = "z-swing%"
CHASE_METRIC = "chase%"


@dataclass(frozen=True)
class LeagueDiscipline:
    zone_swing: Optional[float]
    chase: Optional[float]


def league_discipline(dataset: Dataset, index: PopulationIndex) -> LeagueDiscipline:
    """Qualified-population means of zone-swing and chase rate."""

    return LeagueDiscipline(
        zone_swing=index.qualified_mean(dataset, ZONE_SWING_METRIC),
        chase=index.qualified_mean(dataset, CHASE_METRIC),
    )


def decision_plus(
    zone_swing: Optional[float],
    chase: Optional[float],
    league: LeagueDiscipline,
) -> Optional[int]:
    if zone_swing is None or chase is None or chase == 0:
        return None
    if league.zone_swing is None or league.chase is None or league.zone_swing == 0:
        return None
    return round_half_up(100 * (zone_swing / league.zone_swing + league.chase / chase - 1))


def player_decision_plus(player: PlayerRecord, dataset: Dataset, index: PopulationIndex) -> Optional[int]:
    return decision_plus(
        get_metric(ZONE_SWING_METRIC).value_of(player.attributes),
        get_metric(CHASE_METRIC).value_of(player.attributes),
        league_discipline(dataset, index),
    )


def decision_plus_leaderboard(
    dataset: Dataset,
    index: PopulationIndex,
    *,
    min_at_bats: float | None = None,
    min_plate_appearances: float | None = None,
) -> List[Tuple[PlayerRecord, Optional[int]]]:
    """Records ranked by Decision+, highest first, with missing scores last."""

    league = league_discipline(dataset, index)
    zone_swings = dataset.values(ZONE_SWING_METRIC)
    chases = dataset.values(CHASE_METRIC)
    at_bats = dataset.values("ab")
    plate_appearances = dataset.values("pa")

    rows: List[Tuple[PlayerRecord, Optional[int]]] = []
    for position, record in enumerate(dataset.records):
        if min_at_bats and (at_bats[position] is None or at_bats[position] < min_at_bats):
            continue
        if min_plate_appearances and (
            plate_appearances[position] is None or plate_appearances[position] < min_plate_appearances
        ):
            continue
        rows.append((record, decision_plus(zone_swings[position], chases[position], league)))

    rows.sort(key=lambda row: (row[1] is None, -(row[1] or 0)))
    return rows
