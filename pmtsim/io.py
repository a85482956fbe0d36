"""Reading simulation inputs and configuration, writing simulated signals."""

from __future__ import annotations

import math
import os
from collections.abc import Iterator, Mapping, Sequence
from typing import Union

PathLike = Union[str, "os.PathLike[str]"]

_SKIPPED_PREFIXES = ("#", "{", "}")


def _parse_config_line(line: str) -> tuple[str, str] | None:
    """Turn one configuration line into a key/value pair, or None if it is skipped."""
    compact = "".join(ch for ch in line if not ch.isspace() and ch != "'")
    if not compact or compact.startswith(_SKIPPED_PREFIXES):
        return None

    colon = compact.find(":")
    comma = compact.find(",")
    end = len(compact) if comma == -1 else comma

    if colon == -1:
        return compact, compact[:end]
    if end <= colon:
        # A comma ahead of the colon: the value runs to the end of the line.
        return compact[:colon], compact[colon + 1:]
    return compact[:colon], compact[colon + 1:end]


def read_config(path: PathLike) -> dict[str, str]:
    """Read a ``'key': value,`` style configuration file into a dict of strings.

    Whitespace and single quotes are dropped, and lines that are empty or start
    with ``#``, ``{`` or ``}`` are ignored. A later key overrides an earlier one.
    """
    options: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            pair = _parse_config_line(line)
            if pair is not None:
                key, value = pair
                options[key] = value
    return options


def _numbers(path: PathLike) -> Iterator[float]:
    """Yield whitespace-separated numbers from a file, stopping at the first non-number."""
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            for token in line.split():
                try:
                    value = float(token)
                except ValueError:
                    return
                if math.isnan(value) or math.isinf(value):
                    return
                yield value


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def load_txt_array(path: PathLike) -> list[float]:
    """Load whitespace-separated floating-point numbers from a text file."""
    return list(_numbers(path))


def load_txt_array_int(path: PathLike) -> list[int]:
    """Load numbers from a text file, rounding each to the nearest integer."""
    return [_round_half_away(value) for value in _numbers(path)]


def save_signals_to_csv(signals: Mapping[str, Sequence[float]], path: PathLike) -> None:
    """Write signals as ``KEY,Index,Signal`` rows, keys in sorted order."""
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write("KEY,Index,Signal\n")
        for key in sorted(signals):
            for index, value in enumerate(signals[key]):
                handle.write(f"{key},{index},{float(value):g}\n")