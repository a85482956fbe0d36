"""Generation of digitised PMT waveforms from photon hits."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Mapping, Sequence

import numpy as np
from scipy import special

from pmtsim.hits import PMTData
from pmtsim.io import load_txt_array

logger = logging.getLogger(__name__)

PMTS = ("pmt_1", "pmt_2", "pmt_3", "pmt_4")

_ELECTRON_CHARGE = -1.6e-19
_LOAD_RESISTANCE = 50.0
_ADC_BITS = 12
_FAST_TRIGGER_SAMPLES = 200
_SLOW_TRIGGER_SAMPLES = 1466
_MAX_EXP_ARG = 700.0
_MAX_ERFC_ARG = 30.0
_DIGITIZERS_FAST = ("Both", "Fast")
_DIGITIZERS_SLOW = ("Both", "Slow")


def fwhm2std(fwhm: float) -> float:
    """Convert a Gaussian full width at half maximum to its standard deviation."""
    return fwhm / (2.0 * math.sqrt(2.0 * math.log(2.0)))


def expgaussian(x, gain: float, cen: float, sig: float, lam: float) -> np.ndarray:
    """Voltage of an exponentially modified Gaussian charge pulse over ``x``.

    The pulse carries ``gain`` electrons into a 50 ohm load. Samples where the
    analytic form would overflow are set to zero.
    """
    times = np.asarray(x, dtype=float)
    charge = gain * _ELECTRON_CHARGE
    with np.errstate(all="ignore"):
        exp_arg = lam * (cen - times + (lam * sig * sig / 2.0))
        erfc_arg = (cen + lam * sig * sig - times) / (sig * math.sqrt(2.0))
        valid = (
            np.isfinite(exp_arg)
            & np.isfinite(erfc_arg)
            & (exp_arg <= _MAX_EXP_ARG)
            & (np.abs(erfc_arg) <= _MAX_ERFC_ARG)
        )
        safe_exp = np.where(valid, exp_arg, 0.0)
        safe_erfc = np.where(valid, erfc_arg, 0.0)
        pulse = (lam / 2.0) * np.exp(safe_exp) * special.erfc(safe_erfc)
        pulse = np.where(valid, pulse, 0.0)
        return np.where(np.isfinite(pulse), charge * _LOAD_RESISTANCE * pulse, 0.0)


def _round_half_away(values: np.ndarray) -> np.ndarray:
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def quantization(signal) -> np.ndarray:
    """Quantise a waveform onto the levels of a 12-bit digitiser."""
    values = np.asarray(signal, dtype=float)
    if values.size == 0:
        raise ValueError("cannot quantise an empty signal")
    levels = 1 << _ADC_BITS
    scaled = _round_half_away(values * levels)
    low = scaled.min()
    high = scaled.max()
    interval = (high - low) / (levels - 1)
    if interval == 0:
        quantized = np.zeros_like(scaled)
    else:
        quantized = np.clip(_round_half_away((scaled - low) / interval), 0.0, levels - 1)
    return (quantized * interval + low) / (levels - 1)


def _option_int(options: Mapping[str, str], key: str) -> int:
    return int(float(options[key]))


def _option_float(options: Mapping[str, str], key: str) -> float:
    return float(options[key])


class SignalSimulation:
    """Turns per-voxel PMT hits into noisy, digitised fast and slow waveforms."""

    def __init__(
        self,
        hits: Mapping[str, Mapping[str, PMTData]],
        options: Mapping[str, str],
        rng: np.random.Generator | None = None,
    ) -> None:
        self.hits = {
            voxel: dict(sorted(pmts.items())) for voxel, pmts in sorted(hits.items())
        }
        self.options = dict(options)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.digitizers = self.options["digitizers"]
        self.fast_window_len = _option_int(self.options, "fast_window_len")
        self.slow_window_len = _option_int(self.options, "slow_window_len")
        if self.fast_window_len < 0 or self.slow_window_len < 0:
            raise ValueError("window lengths must not be negative")
        self.fs_fast = _option_float(self.options, "fast_freq")
        self.fs_slow = _option_float(self.options, "slow_freq")
        self.t_fast = np.arange(self.fast_window_len) / self.fs_fast
        self.t_slow = np.arange(self.slow_window_len) / self.fs_slow
        self.fast_noise: dict[str, np.ndarray] = {}
        self.slow_noise: dict[str, np.ndarray] = {}
        self._gen_noise()

    def _gen_noise(self) -> None:
        start = time.perf_counter()
        for pmt in PMTS:
            fast_psd = load_txt_array(self.options[f"fast_noise_path_{pmt}"])
            slow_psd = load_txt_array(self.options[f"slow_noise_path_{pmt}"])
            self.fast_noise[pmt] = self.compute_noise(fast_psd, "Fast")
            self.slow_noise[pmt] = self.compute_noise(slow_psd, "Slow")
        logger.info("Gen noise took %d ms", (time.perf_counter() - start) * 1000)

    def signal_time(self) -> list[float]:
        """Arrival times of every (voxel, PMT) entry, voxel by voxel."""
        return [
            data.arrival_time for pmts in self.hits.values() for data in pmts.values()
        ]

    def transit_time(self) -> float:
        """Draw a PMT transit time, in the units of the configuration (ns)."""
        mu = _option_float(self.options, "transit_time")
        sigma = fwhm2std(_option_float(self.options, "transit_time_spread"))
        return float(self.rng.normal(mu, sigma))

    def compute_noise(self, psd: Sequence[float], digitizer: str) -> np.ndarray:
        """Draw a noise trace whose spectrum follows a one-sided PSD.

        ``digitizer`` is ``"Fast"`` for the fast window; anything else selects
        the slow one.
        """
        density = np.asarray(psd, dtype=float)
        if density.size == 0:
            raise ValueError("the noise PSD is empty")
        if digitizer == "Fast":
            length, fs = self.fast_window_len, self.fs_fast
        else:
            length, fs = self.slow_window_len, self.fs_slow

        full_len = density.size + max(density.size - 2, 0)
        if full_len < length:
            raise ValueError(
                f"a PSD of {density.size} bins cannot give {length} noise samples"
            )
        phases = self.rng.uniform(-math.pi, math.pi, size=density.size)
        with np.errstate(invalid="ignore", divide="ignore"):
            magnitude = np.sqrt(density * fs / length)
        spectrum = magnitude * np.exp(1j * phases)
        noise = np.fft.irfft(spectrum, n=full_len) * full_len
        return noise[:length]

    def _pulse_parameters(self) -> tuple[float, float, float, float]:
        return (
            _option_float(self.options, "pmt_gain"),
            _option_float(self.options, "pmt_sigma"),
            _option_float(self.options, "pmt_lambda"),
            _option_float(self.options, "exp_dispersion_scale"),
        )

    def spe_signal(self, arr_time: float) -> tuple[np.ndarray, np.ndarray]:
        """Fast and slow waveforms of a single photoelectron."""
        gain, sigma, lam, scale = self._pulse_parameters()
        dispersion = float(self.rng.exponential(1.0 / scale)) * 1e9
        mean = (self.transit_time() + arr_time + dispersion) * 1e-9
        shift_fast = float(np.float32(_FAST_TRIGGER_SAMPLES / self.fs_fast))
        shift_slow = float(np.float32(_SLOW_TRIGGER_SAMPLES / self.fs_slow))

        fast = np.zeros(self.fast_window_len)
        slow = np.zeros(self.slow_window_len)
        if self.digitizers in _DIGITIZERS_FAST:
            fast = expgaussian(self.t_fast, gain, mean + shift_fast, sigma, lam)
        if self.digitizers in _DIGITIZERS_SLOW:
            slow = expgaussian(self.t_slow, gain, mean + shift_slow, sigma, lam)
        return fast, slow

    def gen_signal(self, nr_photons: int, arr_time: float) -> tuple[np.ndarray, np.ndarray]:
        """Sum of ``nr_photons`` single-photoelectron waveforms."""
        fast = np.zeros(self.fast_window_len)
        slow = np.zeros(self.slow_window_len)
        for _ in range(nr_photons):
            spe_fast, spe_slow = self.spe_signal(arr_time)
            fast += spe_fast
            slow += spe_slow
        return fast, slow

    def pmt_signal(
        self,
        pmt: str,
        voxel_keys: Sequence[str],
        arrival_times: Sequence[float],
    ) -> tuple[np.ndarray, np.ndarray]:
        """Digitised fast and slow waveforms of one PMT, noise included."""
        if len(arrival_times) < len(voxel_keys):
            raise ValueError("fewer arrival times than voxels")
        fast = np.zeros(self.fast_window_len)
        slow = np.zeros(self.slow_window_len)
        for voxel, arrival in zip(voxel_keys, arrival_times):
            data = self.hits[voxel][pmt]
            voxel_fast, voxel_slow = self.gen_signal(data.hits, arrival)
            fast += voxel_fast
            slow += voxel_slow
        fast += self.fast_noise[pmt]
        slow += self.slow_noise[pmt]
        return quantization(fast), quantization(slow)

    def simulated_signals(self) -> tuple[dict[str, np.ndarray], dict[str, np.ndarray]]:
        """Waveforms of all PMTs plus the ``time`` axis, for both digitisers."""
        start = time.perf_counter()
        voxel_keys = list(self.hits)
        arrival_times = self.signal_time()

        fast_signal: dict[str, np.ndarray] = {}
        slow_signal: dict[str, np.ndarray] = {}
        for pmt in PMTS:
            fast_signal[pmt], slow_signal[pmt] = self.pmt_signal(
                pmt, voxel_keys, arrival_times
            )
        fast_signal["time"] = self.t_fast.copy()
        slow_signal["time"] = self.t_slow.copy()
        logger.info(
            "Signal generation took %d ms", (time.perf_counter() - start) * 1000
        )
        return fast_signal, slow_signal