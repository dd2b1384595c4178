"""Quartile binning of leaf values into the four heatmap buckets.

The value range ``[min(0, lowest), highest]`` is cut into four equal steps
and the three inner boundaries are rounded to the nearest integer. Zero is
always part of the range, so the first bucket starts at or below 0.

All-equal leaf values collapse the three boundaries onto one value; this is
kept as is rather than special-cased.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

from .models import LegendThresholds

NUM_BUCKETS = 4


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to ``digits`` decimals with ties going toward +infinity.

    ``round(2.5)`` is 2 in Python; here it is 3.
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def compute_thresholds(leaf_values: Iterable[float]) -> LegendThresholds:
    """Three ascending bucket boundaries for the realized leaf values.

    An empty value set yields ``(0, 0, 0)``.
    """
    values = np.fromiter(leaf_values, dtype=float)
    if values.size == 0:
        return LegendThresholds(0, 0, 0)

    min_v = min(0.0, float(values.min()))
    step = (float(values.max()) - min_v) / NUM_BUCKETS
    raw = min_v + step * np.arange(1, NUM_BUCKETS)
    first, second, third = (int(b) for b in np.floor(raw + 0.5))
    return LegendThresholds(first, second, third)


def bucket_of(value: float, thresholds: Sequence[float]) -> int:
    """Bucket index 0..3: the number of boundaries at or below ``value``."""
    if value < thresholds[0]:
        return 0
    if value < thresholds[1]:
        return 1
    if value < thresholds[2]:
        return 2
    return 3


def bucket_counts(values: Iterable[float], thresholds: Sequence[float]) -> list[int]:
    """How many of ``values`` fall in each bucket."""
    arr = np.fromiter(values, dtype=float)
    # side="right": a value equal to a boundary belongs to the upper bucket
    buckets = np.searchsorted(np.asarray(thresholds, dtype=float), arr, side="right")
    return [int(n) for n in np.bincount(buckets, minlength=NUM_BUCKETS)]
