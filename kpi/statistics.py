"""
kpi/statistics.py

Central-tendency statistics for discount distributions.

Empty inputs return 0.0 for every statistic instead of raising.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np


class DiscountStatistic:
    MODE = "mode"
    MEDIAN = "median"


ALLOWED_DISCOUNT_STATISTICS: frozenset[str] = frozenset(
    {DiscountStatistic.MODE, DiscountStatistic.MEDIAN}
)


def round_discount(value: float) -> float:
    """
    Round a discount rate half-up to two decimal places.

    ``round()`` uses banker's rounding, which would split ties differently
    from the dashboard's bucketing, so the half-up form is used.
    """
    return math.floor(value * 100 + 0.5) / 100


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return float(np.mean(values))


def median(values: Sequence[float]) -> float:
    """
    Median of *values*.

    Odd length returns the middle element of the ascending sort; even
    length averages the two central elements.  0.0 for an empty sequence.
    """
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return (ordered[mid - 1] + ordered[mid]) / 2


def mode(values: Sequence[float]) -> float:
    """
    Most frequent value of *values*.

    Ties go to the value that first reaches the highest running frequency
    in scan order, so ``[0.0, 0.1, 0.2]`` yields ``0.0``.  0.0 for an empty
    sequence.
    """
    if not values:
        return 0.0
    frequency: dict[float, int] = {}
    best_count = 0
    best_value = values[0]
    for value in values:
        count = frequency.get(value, 0) + 1
        frequency[value] = count
        if count > best_count:
            best_count = count
            best_value = value
    return float(best_value)


def minimum(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(np.min(values))


def maximum(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(np.max(values))
