from pystatdb.config import get_tier
from pystatdb.models import Dataset, PlayerRecord
from pystatdb.stats import PopulationIndex


def _dataset(rows, dataset_id="aaa2025"):
    records = [PlayerRecord.from_mapping({"full_name": f"P{i}", **row}) for i, row in enumerate(rows)]
    return Dataset(get_tier(dataset_id), records)


def test_distribution_is_sorted_and_skips_missing():
    dataset = _dataset([{"max_ev": 110.2}, {"max_ev": 104.0}, {"team": "ABC"}, {"exit_velocity_max": 107.5}])

    assert PopulationIndex().distribution(dataset, "max_ev") == (104.0, 107.5, 110.2)


def test_distribution_is_cached_until_invalidated():
    index = PopulationIndex()
    first = _dataset([{"max_ev": 100.0}])
    second = _dataset([{"max_ev": 90.0}, {"max_ev": 95.0}])

    assert index.distribution(first, "max_ev") == (100.0,)
    # same dataset id, so the cached distribution is reused
    assert index.distribution(second, "max_ev") == (100.0,)

    index.invalidate("aaa2025")
    assert index.distribution(second, "max_ev") == (90.0, 95.0)


def test_invalidate_only_touches_one_dataset():
    index = PopulationIndex()
    aaa = _dataset([{"max_ev": 100.0}])
    aa = _dataset([{"max_ev": 101.0}], dataset_id="aa2025")
    index.distribution(aaa, "max_ev")
    index.distribution(aa, "max_ev")

    index.invalidate("aaa2025")

    assert index.distribution(_dataset([{"max_ev": 1.0}], dataset_id="aa2025"), "max_ev") == (101.0,)


def test_qualified_distribution_uses_sample_threshold():
    dataset = _dataset(
        [
            {"at_bats": 450, "chase%": 25.0},
            {"ab": 299, "chase%": 40.0},
            {"chase%": 10.0},
            {"ab": 300, "chase%": 30.0},
        ]
    )
    index = PopulationIndex()

    assert index.qualified_distribution(dataset, "chase%") == (25.0, 30.0)
    assert index.qualified_mean(dataset, "chase%") == 27.5
    assert index.distribution(dataset, "chase%") == (10.0, 25.0, 30.0, 40.0)
    assert PopulationIndex(min_sample=500).qualified_mean(dataset, "chase%") is None
