"""
kpi/base.py

Metric selector shared by every formula and aggregation.

A metric selector names which derived quantity a view should compute.
``profitMargin`` is never a raw per-row field: it is always derived from
summed sales and profit at the granularity in use.
"""

from __future__ import annotations


class Metric:
    SALES = "sales"
    PROFIT = "profit"
    QUANTITY = "quantity"
    PROFIT_MARGIN = "profitMargin"


ALLOWED_METRICS: frozenset[str] = frozenset(
    {
        Metric.SALES,
        Metric.PROFIT,
        Metric.QUANTITY,
        Metric.PROFIT_MARGIN,
    }
)

METRIC_LABELS: dict[str, str] = {
    Metric.PROFIT: "Profit",
    Metric.SALES: "Sales",
    Metric.QUANTITY: "Quantity",
    Metric.PROFIT_MARGIN: "Profit Margin",
}


class UnknownMetricError(ValueError):
    """
    Raised when a metric selector outside :data:`ALLOWED_METRICS` is passed.
    """


def validate_metric(metric: str) -> str:
    """
    Return *metric* unchanged when it is a known selector.

    Raises
    ------
    UnknownMetricError
        If *metric* is not one of :data:`ALLOWED_METRICS`.
    """
    if metric not in ALLOWED_METRICS:
        raise UnknownMetricError(
            f"Unknown metric {metric!r}. Valid metrics: {sorted(ALLOWED_METRICS)}"
        )
    return metric
