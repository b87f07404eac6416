"""
app/services/geo_service.py

Choropleth helpers for the per-state map.

Value view: a three-stop scale, white at zero, ``#0b2d79`` at the highest
positive value and ``#e43fdd`` at the most negative value.  Region view:
each state takes its region's colour; other regions are dimmed while a
region filter is active.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from app.domain.aggregates import StateEntry
from app.domain.lookups import DIMMED, NO_DATA, REGION_COLORS, STATE_TO_REGION
from app.domain.transaction import is_unrestricted
from kpi.metrics import resolve_metric

_WHITE = (255, 255, 255)
_POSITIVE_RGB = (11, 45, 121)
_NEGATIVE_RGB = (228, 63, 221)

NO_DATA_OPACITY = 0.3


@dataclass(frozen=True)
class MapColor:
    color: str
    opacity: float = 1.0


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _blend(target: tuple[int, int, int], ratio: float) -> str:
    r, g, b = (
        _round_half_up(white - (white - channel) * ratio)
        for white, channel in zip(_WHITE, target)
    )
    return f"rgb({r}, {g}, {b})"


def state_metric_value(entry: StateEntry, metric: str) -> float:
    """Resolve *metric* for one state, deriving margin from its sums."""
    return resolve_metric(entry.sales, entry.profit, entry.quantity, metric)


def metric_range(states: Iterable[StateEntry], metric: str) -> tuple[float, float]:
    """Return ``(min, max)`` of *metric* across *states*; ``(0, 0)`` when empty."""
    values = [state_metric_value(entry, metric) for entry in states]
    if not values:
        return 0.0, 0.0
    return min(values), max(values)


def choropleth_color(value: float, min_value: float, max_value: float) -> str:
    """
    Map *value* onto the three-stop scale.

    A zero-width range renders every state white.
    """
    if max_value == min_value:
        return "#ffffff"
    if value >= 0:
        ratio = value / max_value if max_value > 0 else 0.0
        return _blend(_POSITIVE_RGB, ratio)
    ratio = abs(value) / abs(min_value) if min_value < 0 else 0.0
    return _blend(_NEGATIVE_RGB, ratio)


def value_colors(states: Iterable[StateEntry], metric: str) -> dict[str, MapColor]:
    """Colour every state by its metric value."""
    entries = list(states)
    low, high = metric_range(entries, metric)
    return {
        entry.state: MapColor(choropleth_color(state_metric_value(entry, metric), low, high))
        for entry in entries
    }


def region_color(state: str, selected_region: str | None) -> MapColor:
    """Colour *state* by its region, dimming regions outside the selection."""
    region = STATE_TO_REGION.get(state)
    if region is None:
        return MapColor(NO_DATA, NO_DATA_OPACITY)
    if not is_unrestricted(selected_region) and region != selected_region:
        return MapColor(DIMMED)
    return MapColor(REGION_COLORS.get(region, NO_DATA))
