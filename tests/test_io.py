import csv

import pytest

from pmtsim.io import (
    load_txt_array,
    load_txt_array_int,
    read_config,
    save_signals_to_csv,
)


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_read_config_strips_quotes_spaces_and_commas(tmp_path):
    path = _write(
        tmp_path,
        "config.txt",
        "{\n"
        "  'pmt_number' : 4,\n"
        "# a comment line\n"
        "\n"
        "  'fast_freq': 750e6 ,\n"
        "  'digitizers': 'Both'\n"
        "}\n",
    )
    options = read_config(path)
    assert options == {"pmt_number": "4", "fast_freq": "750e6", "digitizers": "Both"}


def test_read_config_later_key_wins(tmp_path):
    path = _write(tmp_path, "config.txt", "'a': 1,\n'a': 2,\n")
    assert read_config(path) == {"a": "2"}


def test_read_config_keeps_path_values(tmp_path):
    path = _write(tmp_path, "config.txt", "'noise': '../noise/pmt1.txt',\n")
    assert read_config(path)["noise"] == "../noise/pmt1.txt"


def test_read_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_config(tmp_path / "missing.txt")


def test_load_txt_array_reads_all_numbers(tmp_path):
    path = _write(tmp_path, "values.txt", "1.5 2\n3e-2\n\n-4.25\n")
    assert load_txt_array(path) == [1.5, 2.0, 3e-2, -4.25]


def test_load_txt_array_stops_at_non_number(tmp_path):
    path = _write(tmp_path, "values.txt", "1 2 oops 3\n")
    assert load_txt_array(path) == [1.0, 2.0]


def test_load_txt_array_empty_file(tmp_path):
    path = _write(tmp_path, "empty.txt", "")
    assert load_txt_array(path) == []


def test_load_txt_array_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_txt_array(tmp_path / "missing.txt")


def test_load_txt_array_int_rounds_halves_away_from_zero(tmp_path):
    path = _write(tmp_path, "ints.txt", "2.5 -2.5 7 0.4\n")
    assert load_txt_array_int(path) == [3, -3, 7, 0]


def test_load_txt_array_int_matches_float_loader_on_integers(tmp_path):
    path = _write(tmp_path, "ints.txt", "10 20 30\n")
    assert load_txt_array_int(path) == [int(v) for v in load_txt_array(path)]


def test_save_signals_to_csv_layout(tmp_path):
    path = tmp_path / "out.csv"
    save_signals_to_csv({"pmt_2": [0.5], "pmt_1": [1.0, 2.5]}, path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == ["KEY,Index,Signal", "pmt_1,0,1", "pmt_1,1,2.5", "pmt_2,0,0.5"]


def test_save_signals_to_csv_round_trip(tmp_path):
    signals = {"time": [0.0, 1.25e-9, 2.5e-9], "pmt_1": [-0.125, 0.0, 0.75]}
    path = tmp_path / "out.csv"
    save_signals_to_csv(signals, path)
    with open(path, newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    restored: dict[str, list[float]] = {}
    for row in rows:
        values = restored.setdefault(row["KEY"], [])
        assert int(row["Index"]) == len(values)
        values.append(float(row["Signal"]))
    assert restored == signals


def test_save_signals_to_csv_unwritable_path(tmp_path):
    with pytest.raises(OSError):
        save_signals_to_csv({"a": [1.0]}, tmp_path / "no_dir" / "out.csv")