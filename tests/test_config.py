import pytest

from pystatdb.config import (
    DEFAULT_DATASET_ID,
    Settings,
    UnknownTierError,
    get_metric,
    get_tier,
    get_tier_by_file,
    iter_tiers,
    resolve_tier,
)
from pystatdb.config_loader import WeightProfile


def test_get_tier_is_case_insensitive():
    tier = get_tier("MLB2025")
    assert tier.data_file == "players.json"
    assert "bat_speed" in tier.similarity_metrics


def test_get_tier_missing_raises_key_error():
    with pytest.raises(KeyError):
        get_tier("curling2025")
    with pytest.raises(UnknownTierError):
        get_tier_by_file("players99.json")


def test_resolve_tier_falls_back_to_default():
    assert resolve_tier("nope").dataset_id == DEFAULT_DATASET_ID
    assert resolve_tier(None).dataset_id == DEFAULT_DATASET_ID
    assert resolve_tier("ncaa2025").data_file == "players6.json"


def test_every_tier_references_known_metrics():
    for tier in iter_tiers():
        for metric_id in (*tier.percentile_metrics, *tier.similarity_metrics, *tier.similarity_weights):
            get_metric(metric_id)


def test_tier_weights_default_to_one():
    tier = get_tier("a2025")
    assert tier.weight_for("avg_la") == 3.5
    assert tier.weight_for("chase%") == 1.0


def test_metric_aliases_and_direction():
    chase = get_metric("chase%")
    assert chase.lower_is_better
    assert chase.value_of({"chase_percent": 28.4}) == 28.4
    assert chase.resolve_key({"o_swing_percent": 30}) == "o_swing_percent"
    assert not get_metric("bat_speed").lower_is_better

    with pytest.raises(KeyError):
        get_metric("war")


def test_metric_value_prefers_canonical_key():
    assert get_metric("k%").value_of({"k%": 20.0, "k_percent": 25.0}) == 20.0
    assert get_metric("k%").value_of({"k%": None, "k_percent": 25.0}) == 25.0


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("PYSTATDB_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PYSTATDB_SEASON", "2024")
    monkeypatch.setenv("PYSTATDB_FETCH_DELAY", "-3")
    monkeypatch.setenv("PYSTATDB_FETCH_TIMEOUT", "not-a-number")

    settings = Settings.from_env()

    assert settings.data_dir == tmp_path
    assert settings.season == 2024
    assert settings.fetch_delay == 0.0
    assert settings.fetch_timeout == 30.0


def test_settings_ignore_blank_and_unparseable_values(monkeypatch):
    monkeypatch.setenv("PYSTATDB_SEASON", "abc")
    monkeypatch.setenv("PYSTATDB_FETCH_DELAY", "inf")
    monkeypatch.setenv("PYSTATDB_FETCH_TIMEOUT", "nan")
    monkeypatch.setenv("PYSTATDB_PITCHER_FETCH_TIMEOUT", "   ")

    settings = Settings.from_env()

    assert settings.season == 2025
    assert settings.fetch_delay == 1.5
    assert settings.fetch_timeout == 30.0
    assert settings.pitcher_fetch_timeout == 180.0

    monkeypatch.setenv("PYSTATDB_SEASON", " 1850 ")
    assert Settings.from_env().season == 1900


def test_weight_profile_round_trip(tmp_path):
    path = tmp_path / "weights.json"
    WeightProfile({"avg_la": 2.0}, ["chase%", "avg_la", "z-swing%"]).save(path)

    profile = WeightProfile.load(path)

    assert profile.weights == {"avg_la": 2.0}
    assert profile.metrics == ["chase%", "avg_la", "z-swing%"]
