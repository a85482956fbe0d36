"""Propagation of scintillation photons from emission points to the PMTs."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np

# Exponent of the distance fall-off of the light yield on a PMT.
_DISTANCE_EXPONENT = 3.6


@dataclass(frozen=True)
class PMTData:
    """Photons that reach one PMT from one voxel, and when they were emitted."""

    hits: int
    arrival_time: float


def _option_float(options: Mapping[str, str], key: str) -> float:
    return float(options[key])


def _option_int(options: Mapping[str, str], key: str) -> int:
    return int(float(options[key]))


class PhotonPropagation:
    """Draws PMT photon counts for a set of light-emitting voxels."""

    z_0 = 0.0

    def __init__(
        self,
        x_0: Sequence[float],
        y_0: Sequence[float],
        n_photons: Sequence[int],
        arr_times: Sequence[float],
        options: Mapping[str, str],
        rng: np.random.Generator | None = None,
    ) -> None:
        lengths = {len(x_0), len(y_0), len(n_photons), len(arr_times)}
        if len(lengths) != 1:
            raise ValueError(
                "x_0, y_0, n_photons and arr_times must have the same length"
            )
        self.x_0 = list(x_0)
        self.y_0 = list(y_0)
        self.n_photons = list(n_photons)
        self.arr_times = list(arr_times)
        self.options = dict(options)
        self.rng = rng if rng is not None else np.random.default_rng()

    def sim_pmt_hits_with_eq(self, x: float, y: float, n_photons: int) -> dict[str, int]:
        """Draw the number of photons each PMT collects from a point at (x, y)."""
        r_pmt = _option_float(self.options, "pmt_radius")
        z_pmt = _option_float(self.options, "dist_gem_pmt")
        pmt_count = _option_int(self.options, "pmt_number")

        hits: dict[str, int] = {}
        for number in range(1, pmt_count + 1):
            name = f"pmt_{number}"
            x_pmt = _option_float(self.options, f"{name}_x")
            y_pmt = _option_float(self.options, f"{name}_y")
            distance = math.sqrt(
                (x_pmt - x) ** 2 + (y_pmt - y) ** 2 + (z_pmt - self.z_0) ** 2
            )
            mean = (
                n_photons * r_pmt**2 * z_pmt**2
                / (4.0 * distance**_DISTANCE_EXPONENT)
            )
            hits[name] = int(self.rng.poisson(mean))
        return dict(sorted(hits.items()))

    def pmt_hits(self) -> dict[str, dict[str, PMTData]]:
        """Simulate every voxel; keys are ``voxel_<i>`` in sorted order."""
        all_hits: dict[str, dict[str, PMTData]] = {}
        for index, (x, y, photons, arrival) in enumerate(
            zip(self.x_0, self.y_0, self.n_photons, self.arr_times)
        ):
            counts = self.sim_pmt_hits_with_eq(x, y, photons)
            all_hits[f"voxel_{index}"] = {
                pmt: PMTData(hits=count, arrival_time=arrival)
                for pmt, count in counts.items()
            }
        return dict(sorted(all_hits.items()))