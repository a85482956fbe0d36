"""Command line entry point running the full PMT simulation."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import numpy as np

from pmtsim.hits import PhotonPropagation
from pmtsim.io import (
    load_txt_array,
    load_txt_array_int,
    read_config,
    save_signals_to_csv,
)
from pmtsim.signals import SignalSimulation


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pmtsim", description="Simulate PMT hits and digitised PMT signals."
    )
    parser.add_argument(
        "--arrays-dir",
        default="../6keV_arrays",
        help="directory with x_0.txt, y_0.txt, n_photons.txt and arr_times.txt",
    )
    parser.add_argument(
        "--config", default="../config/ConfigFile_new.txt", help="configuration file"
    )
    parser.add_argument(
        "--output-dir", default="../output", help="directory for the CSV outputs"
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    return parser


def main(argv=None) -> int:
    """Run the simulation and write fast_signal.csv and slow_signal.csv."""
    args = _build_parser().parse_args(argv)
    start_total = time.perf_counter()

    arrays = Path(args.arrays_dir)
    try:
        x0 = load_txt_array(arrays / "x_0.txt")
        y0 = load_txt_array(arrays / "y_0.txt")
        photons = load_txt_array_int(arrays / "n_photons.txt")
        arrival_times = load_txt_array(arrays / "arr_times.txt")
    except OSError as exc:
        print(f"Error opening the file: {exc.filename}", file=sys.stderr)
        return 1

    print("Start PMT simulation")
    try:
        options = read_config(args.config)
    except OSError as exc:
        print(f"Error opening the file: {exc.filename}", file=sys.stderr)
        return 1

    rng = np.random.default_rng(args.seed)
    try:
        print("Photon Propagation - start")
        start = time.perf_counter()
        propagation = PhotonPropagation(x0, y0, photons, arrival_times, options, rng)
        hits = propagation.pmt_hits()
        print(f"Photon Propagation - end ({_elapsed_ms(start)} ms)")

        print("Signal simulation - start")
        start = time.perf_counter()
        simulator = SignalSimulation(hits, options, rng)
        fast_signal, slow_signal = simulator.simulated_signals()
        print(f"Signal simulation - end ({_elapsed_ms(start)} ms)")
    except KeyError as exc:
        print(f"Missing configuration option: {exc.args[0]}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        print(f"Simulation failed: {exc}", file=sys.stderr)
        return 1

    print(f"End PMT Simulation ({_elapsed_ms(start_total)} ms)")

    status = 0
    output = Path(args.output_dir)
    for name, signals in (("fast_signal.csv", fast_signal), ("slow_signal.csv", slow_signal)):
        path = output / name
        try:
            save_signals_to_csv(signals, path)
        except OSError:
            print("Error csv", file=sys.stderr)
            status = 1
        else:
            print(f"Signals saved in {path}")
    return status


if __name__ == "__main__":
    sys.exit(main())