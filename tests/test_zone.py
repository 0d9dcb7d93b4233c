import pytest

from pystatdb.models import PitchEvent
from pystatdb.stats import zd_plus, zone_contact_summary
from pystatdb.stats.zone import (
    ZONE_BASELINE,
    out_of_zone_adjustment,
    overall_xwoba,
    raw_per_pitch,
    tally_pitches,
    zone_points,
)


def _in_play(zone, xwoba):
    return PitchEvent(zone=zone, description="hit_into_play", estimated_woba=xwoba)


def _take(zone):
    return PitchEvent(zone=zone, description="called_strike" if zone <= 9 else "ball")


def _chase(zone):
    return PitchEvent(zone=zone, description="swinging_strike")


def _zone5_profile(xwoba, in_play=10, takes=50):
    return [_in_play(5, xwoba) for _ in range(in_play)] + [_take(5) for _ in range(takes)]


def test_zone_with_too_few_balls_in_play_contributes_nothing():
    events = [_in_play(1, 0.9) for _ in range(3)] + [_take(1) for _ in range(40)] + _zone5_profile(0.4348)

    total, covered = zone_points(tally_pitches(events))

    assert covered == 60
    assert total == pytest.approx(0.0, abs=1e-6)


def test_fewer_than_fifty_covered_pitches_gives_none():
    events = _zone5_profile(0.6, in_play=10, takes=30)

    assert raw_per_pitch(tally_pitches(events)) is None
    assert zd_plus(events) is None


def test_baseline_batter_with_no_chase_data_scores_100():
    assert zd_plus(_zone5_profile(ZONE_BASELINE[5])) == 100


def test_good_contact_rewards_swings_and_penalizes_takes():
    # 10 swings earn 100 points each and 50 takes lose 100 each: -4000 / 60 pitches
    events = _zone5_profile(ZONE_BASELINE[5] + 0.1)

    assert raw_per_pitch(tally_pitches(events)) == pytest.approx(-4000 / 60)
    assert zd_plus(events) == round(100 + (-4000 / 60) / 30 * 15)


def test_out_of_zone_adjustment():
    tally = tally_pitches([_take(11) for _ in range(8)] + [_chase(13) for _ in range(2)])
    assert out_of_zone_adjustment(tally) == pytest.approx(((8 * 60 - 2 * 40) / 10 - 32) / 3)

    few = tally_pitches([_take(11) for _ in range(9)])
    assert out_of_zone_adjustment(few) == 0.0


def test_disciplined_batter_gets_out_of_zone_bonus():
    events = _zone5_profile(ZONE_BASELINE[5]) + [_take(14) for _ in range(20)]

    assert zd_plus(events) == round(100 + (60 - 32) / 3)


def test_empty_feed_gives_none():
    assert zd_plus([]) is None
    summary = zone_contact_summary([])
    assert summary.zd_plus is None
    assert summary.xwoba is None
    assert summary.pitch_count == 0
    assert len(summary.zones) == 9


def test_overall_xwoba_needs_ten_samples():
    nine = tally_pitches([_in_play(15, 0.3) for _ in range(9)])
    assert overall_xwoba(nine) is None

    ten = tally_pitches([_in_play(15, 0.3) for _ in range(5)] + [_in_play(2, 0.4) for _ in range(5)])
    assert overall_xwoba(ten) == pytest.approx(0.35)


def test_zone_contact_breakdown():
    events = (
        [_in_play(5, 0.5) for _ in range(5)]
        + [PitchEvent(zone=5, description="swinging_strike") for _ in range(3)]
        + [PitchEvent(zone=5, description="foul") for _ in range(2)]
        + [_take(5) for _ in range(10)]
        + [_take(1) for _ in range(4)]
    )

    summary = zone_contact_summary(events)
    zone5 = summary.zones[4]
    zone1 = summary.zones[0]

    assert zone5["pitches"] == 20
    assert zone5["swings"] == 10
    assert zone5["contacts"] == 7
    assert zone5["swing_pct"] == 50.0
    assert zone5["contact_pct"] == 70.0
    assert zone5["xwoba"] == 0.5
    assert zone5["xwoba_n"] == 5
    assert zone1["swing_pct"] is None
    assert zone1["contact_pct"] is None
    assert zone1["xwoba"] is None
    assert summary.pitch_count == 24
    assert summary.zd_raw is None
