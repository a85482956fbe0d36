import numpy as np
import pytest

from pmtsim.hits import PhotonPropagation, PMTData


def _options():
    return {
        "pmt_number": "4",
        "pmt_radius": "10",
        "dist_gem_pmt": "20",
        "pmt_1_x": "-50",
        "pmt_1_y": "-50",
        "pmt_2_x": "50",
        "pmt_2_y": "-50",
        "pmt_3_x": "-50",
        "pmt_3_y": "50",
        "pmt_4_x": "50",
        "pmt_4_y": "50",
    }


def _propagation(x, y, photons, times, seed=1):
    return PhotonPropagation(x, y, photons, times, _options(), np.random.default_rng(seed))


def test_sim_pmt_hits_names_every_pmt():
    prop = _propagation([0.0], [0.0], [100], [0.0])
    hits = prop.sim_pmt_hits_with_eq(0.0, 0.0, 1000)
    assert list(hits) == ["pmt_1", "pmt_2", "pmt_3", "pmt_4"]
    assert all(isinstance(v, int) and v >= 0 for v in hits.values())


def test_zero_photons_give_zero_hits():
    prop = _propagation([0.0], [0.0], [0], [0.0])
    assert set(prop.sim_pmt_hits_with_eq(10.0, -5.0, 0).values()) == {0}


def test_closer_pmt_collects_more_light():
    prop = _propagation([0.0], [0.0], [0], [0.0], seed=7)
    near = far = 0
    for _ in range(200):
        hits = prop.sim_pmt_hits_with_eq(-50.0, -50.0, 5_000_000)
        near += hits["pmt_1"]
        far += hits["pmt_4"]
    assert near > far


def test_same_seed_is_reproducible():
    args = ([1.0, -3.0], [2.0, 4.0], [10**6, 10**6], [5.0, 6.0])
    first = _propagation(*args, seed=42).pmt_hits()
    second = _propagation(*args, seed=42).pmt_hits()
    assert first == second


def test_pmt_hits_carries_arrival_times():
    prop = _propagation([0.0, 1.0], [0.0, 1.0], [10**6, 10**6], [12.5, 30.0])
    result = prop.pmt_hits()
    assert [d.arrival_time for d in result["voxel_0"].values()] == [12.5] * 4
    assert [d.arrival_time for d in result["voxel_1"].values()] == [30.0] * 4
    assert all(isinstance(d, PMTData) for d in result["voxel_0"].values())


def test_pmt_hits_voxel_keys_sorted_as_strings():
    count = 12
    prop = _propagation([0.0] * count, [0.0] * count, [1] * count, [0.0] * count)
    keys = list(prop.pmt_hits())
    assert keys == sorted(f"voxel_{i}" for i in range(count))
    assert keys[2] == "voxel_10"


def test_pmt_hits_empty_input():
    assert _propagation([], [], [], []).pmt_hits() == {}


def test_mismatched_lengths_rejected():
    with pytest.raises(ValueError):
        PhotonPropagation([0.0, 1.0], [0.0], [1, 1], [0.0, 0.0], _options())


def test_missing_option_raises():
    options = _options()
    del options["pmt_radius"]
    prop = PhotonPropagation([0.0], [0.0], [1], [0.0], options)
    with pytest.raises(KeyError):
        prop.pmt_hits()