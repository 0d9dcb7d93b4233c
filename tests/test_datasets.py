import json

import pytest

from pystatdb.config import UnknownTierError
from pystatdb.ingest import DatasetFormatError, DatasetNotFoundError, DatasetRepository, load_records
from pystatdb.stats import PopulationIndex


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_load_records_keeps_unknown_fields(tmp_path):
    path = tmp_path / "players.json"
    _write(path, [{"player_id": 1, "full_name": "A", "ff": {"velo": 95.0}, "avg_ev": 90.1}])

    records = load_records(path)

    assert records[0].get("ff") == {"velo": 95.0}
    assert records[0].value("avg_ev") == 90.1


def test_missing_and_malformed_files(tmp_path):
    with pytest.raises(DatasetNotFoundError):
        load_records(tmp_path / "nope.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(DatasetFormatError):
        load_records(bad)

    _write(bad, {"players": []})
    with pytest.raises(DatasetFormatError):
        load_records(bad)

    _write(bad, [1, 2])
    with pytest.raises(DatasetFormatError):
        load_records(bad)


def test_repository_maps_tiers_to_files(tmp_path):
    _write(tmp_path / "players6.json", [{"player_id": 9, "full_name": "College Bat", "avg_ev": 85.0}])
    repository = DatasetRepository(tmp_path)

    dataset = repository.load("NCAA2025")

    assert dataset.dataset_id == "ncaa2025"
    assert repository.load("ncaa2025") is dataset
    with pytest.raises(UnknownTierError):
        repository.load("independent2025")
    with pytest.raises(DatasetNotFoundError):
        repository.load("mlb2025")


def test_save_round_trips_and_invalidates_population(tmp_path):
    _write(tmp_path / "players2.json", [{"player_id": 1, "full_name": "A", "max_ev": 100.0}])
    index = PopulationIndex()
    repository = DatasetRepository(tmp_path, population_index=index)
    dataset = repository.load("aaa2025")
    assert index.distribution(dataset, "max_ev") == (100.0,)

    updated = dataset.replace_records([record.with_fields(max_ev=105.0) for record in dataset.records])
    path = repository.save(updated)

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored == [{"player_id": 1, "full_name": "A", "max_ev": 105.0}]
    assert index.distribution(repository.load("aaa2025"), "max_ev") == (105.0,)


def test_reload_reads_disk_again(tmp_path):
    path = tmp_path / "players.json"
    _write(path, [{"player_id": 1, "full_name": "A"}])
    repository = DatasetRepository(tmp_path)
    assert len(repository.load("mlb2025")) == 1

    _write(path, [{"player_id": 1, "full_name": "A"}, {"player_id": 2, "full_name": "B"}])

    assert len(repository.load("mlb2025")) == 1
    assert len(repository.reload("mlb2025")) == 2
