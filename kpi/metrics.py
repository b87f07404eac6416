"""
kpi/metrics.py

Metric resolver and guarded ratio formulas.

Formulas
--------
Profit Margin    = 100 * profit / sales            (0 when sales <= 0)
Share of Total   = 100 * part / whole              (0 when whole <= 0)
Signed Share     = 100 * part / whole              (0 only when whole == 0)

Margin is always computed from *summed* sales and profit of a group.
Averaging per-row margins is never used.

All arithmetic is self-contained.  No I/O, no logging, no side effects.
"""

from __future__ import annotations

from typing import Protocol

from kpi.base import Metric, validate_metric

_ZERO = 0.0


class HasMeasures(Protocol):
    sales: float
    profit: float
    quantity: int


# ---------------------------------------------------------------------------
# Guarded ratios
# ---------------------------------------------------------------------------


def profit_margin(sales: float, profit: float) -> float:
    """
    Profit Margin = 100 * profit / sales.

    Returns 0.0 when sales is zero or negative, regardless of the sign of
    profit.
    """
    if sales > 0:
        return profit / sales * 100
    return _ZERO


def share_of_total(part: float, whole: float) -> float:
    """
    Share of Total = 100 * part / whole.

    Returns 0.0 when whole is zero or negative.
    """
    if whole > 0:
        return part / whole * 100
    return _ZERO


def signed_share(part: float, whole: float) -> float:
    """
    Share of a signed total = 100 * part / whole.

    Only ``whole == 0`` is guarded.  A negative *whole* produces a
    sign-flipped percentage.
    """
    if whole != 0:
        return part / whole * 100
    return _ZERO


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


def resolve_metric(sales: float, profit: float, quantity: float, metric: str) -> float:
    """
    Resolve *metric* from summed measures of one group.

    Raises
    ------
    kpi.base.UnknownMetricError
        If *metric* is not a known selector.
    """
    validate_metric(metric)
    if metric == Metric.SALES:
        return sales
    if metric == Metric.QUANTITY:
        return quantity
    if metric == Metric.PROFIT:
        return profit
    return profit_margin(sales, profit)


def value_of_record(record: HasMeasures, metric: str) -> float:
    """Resolve *metric* for a single record (per-row margin for ``profitMargin``)."""
    return resolve_metric(record.sales, record.profit, record.quantity, metric)
