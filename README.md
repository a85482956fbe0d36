# pmtsim

`pmtsim` simulates the response of photomultiplier tubes (PMTs) to light
emitted from points in a plane. It runs in two stages:

1. **Photon propagation** (`pmtsim.hits`) – for every emission point (a
   "voxel") it draws the number of photons reaching each PMT from a Poisson
   distribution whose mean is
   `n_photons * r_pmt² * z_pmt² / (4 * R^3.6)`, where `R` is the distance
   from the point to the PMT.
2. **Signal generation** (`pmtsim.signals`) – every detected photon becomes a
   single-photoelectron pulse: an exponentially modified Gaussian whose
   centre is the arrival time plus a normally distributed transit time plus
   an exponentially distributed dispersion, shifted by 200 samples on the
   fast digitiser and 1466 samples on the slow one. The pulses of each PMT
   are summed, noise drawn from a power spectral density (PSD) is added, and
   the result is quantised onto 12-bit levels.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

```
pmtsim [--arrays-dir DIR] [--config FILE] [--output-dir DIR] [--seed N]
```

| Option | Default | Meaning |
| --- | --- | --- |
| `--arrays-dir` | `../6keV_arrays` | directory holding the input arrays |
| `--config` | `../config/ConfigFile_new.txt` | configuration file |
| `--output-dir` | `../output` | directory for the CSV files (must already exist) |
| `--seed` | none | seed for the random generator |

The command reads `x_0.txt`, `y_0.txt`, `n_photons.txt` and `arr_times.txt`
from the arrays directory, runs both stages, prints the time each stage took
and writes `fast_signal.csv` and `slow_signal.csv` into the output directory.
It exits with status 1 if an input file cannot be opened, a configuration
option is missing, the simulation fails, or a CSV file cannot be written.

Each CSV file has the header `KEY,Index,Signal` and one row per sample. Keys
are written in sorted order: `pmt_1` … `pmt_4` and `time` (the sample times,
in seconds).

## Input arrays

Four text files of whitespace-separated numbers, one value per emission
point, all of the same length:

- `x_0.txt` – x coordinates,
- `y_0.txt` – y coordinates,
- `n_photons.txt` – photons emitted at each point (rounded to the nearest
  integer, halves away from zero),
- `arr_times.txt` – arrival time of the light at each point, in ns.

Reading stops at the first token that is not a finite number.

## Configuration file

One `key: value` entry per line. All whitespace and single quotes are
removed, lines that are empty or start with `#`, `{` or `}` are skipped, and a
value ends at the first comma after the colon, so a Python-style dictionary
literal reads correctly. Later keys override earlier ones. All values are
kept as strings and converted where they are used.

| Key | Meaning |
| --- | --- |
| `pmt_number` | number of PMTs hit in the propagation stage |
| `pmt_radius` | PMT radius |
| `dist_gem_pmt` | distance between the emission plane and the PMTs |
| `pmt_<n>_x`, `pmt_<n>_y` | position of PMT `n` |
| `digitizers` | `Fast`, `Slow` or `Both`: which pulses are generated |
| `fast_window_len`, `slow_window_len` | samples per waveform |
| `fast_freq`, `slow_freq` | sampling frequencies |
| `transit_time`, `transit_time_spread` | mean and FWHM of the transit time, in ns |
| `pmt_gain`, `pmt_sigma`, `pmt_lambda` | pulse gain, Gaussian width and decay rate |
| `exp_dispersion_scale` | rate of the exponential time dispersion |
| `fast_noise_path_pmt_<n>`, `slow_noise_path_pmt_<n>` | one-sided noise PSD files for PMTs 1–4 |

A PSD of `k` bins yields a noise trace of `2k - 2` samples, which must be at
least the window length; otherwise `ValueError` is raised.

## Library use

```python
import numpy as np

from pmtsim.io import read_config, load_txt_array, load_txt_array_int, save_signals_to_csv
from pmtsim.hits import PhotonPropagation
from pmtsim.signals import SignalSimulation

options = read_config("config.txt")
rng = np.random.default_rng(1)

propagation = PhotonPropagation(
    load_txt_array("x_0.txt"),
    load_txt_array("y_0.txt"),
    load_txt_array_int("n_photons.txt"),
    load_txt_array("arr_times.txt"),
    options,
    rng,
)
hits = propagation.pmt_hits()   # {"voxel_0": {"pmt_1": PMTData(hits=..., arrival_time=...), ...}, ...}

simulation = SignalSimulation(hits, options, rng)
fast_signal, slow_signal = simulation.simulated_signals()

save_signals_to_csv(fast_signal, "fast_signal.csv")
save_signals_to_csv(slow_signal, "slow_signal.csv")
```

Passing a seeded `numpy.random.Generator` makes a run reproducible; without
one, a fresh generator is used. `SignalSimulation` generates the noise traces
when it is created, and logs the time taken for noise and signal generation
through the `pmtsim.signals` logger.

The helpers `fwhm2std`, `expgaussian` and `quantization` in `pmtsim.signals`
can be used on their own. `quantization` raises `ValueError` for an empty
signal.

## Limitations

- Signals are always generated for exactly four PMTs, `pmt_1` to `pmt_4`;
  the hits passed to `SignalSimulation` must contain all four for every
  voxel, so `pmt_number` should be at least 4.
- The output directory is not created; it must exist before the command runs.
- There is no plotting or other visualisation of the waveforms; the results
  are available only as arrays and CSV files.