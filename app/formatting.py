"""
app/formatting.py

Display formatting for metric values.

The aggregation layer returns raw numbers; these helpers are for the
presentation layer and the summary export only.
"""

from __future__ import annotations

from kpi.base import Metric


def _grouped(value: float) -> str:
    """Thousands-separated number with at most three decimals."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def format_metric_value(value: float, metric: str) -> str:
    """
    Compact value for scorecards and summaries.

    ``12.3%`` for margin, ``1,234`` for quantity, ``$1.23M`` / ``$4.5K`` /
    ``$678`` for currency.
    """
    if metric == Metric.PROFIT_MARGIN:
        return f"{value:.1f}%"
    if metric == Metric.QUANTITY:
        return _grouped(value)
    if abs(value) >= 1_000_000:
        return f"${value / 1_000_000:.2f}M"
    if abs(value) >= 1_000:
        return f"${value / 1_000:.1f}K"
    return f"${value:.0f}"


def format_axis_value(value: float, metric: str) -> str:
    """Short tick label for chart axes."""
    if metric == Metric.PROFIT_MARGIN:
        return f"{value:.0f}%"
    if metric == Metric.QUANTITY:
        if abs(value) >= 1_000:
            return f"{value / 1_000:.1f}K"
        return f"{value:.0f}"
    if abs(value) >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if abs(value) >= 1_000:
        return f"${value / 1_000:.0f}K"
    return f"${value:.0f}"


def format_full_value(value: float, metric: str) -> str:
    """Unabbreviated value for tooltips."""
    if metric == Metric.PROFIT_MARGIN:
        return f"{value:.2f}%"
    if metric == Metric.QUANTITY:
        return _grouped(value)
    return f"${value:,.2f}"


def format_percent_change(value: float | None) -> str:
    """Scorecard comparison label; empty when no comparison was requested."""
    if value is None:
        return ""
    return f"{value:.1f}%"
