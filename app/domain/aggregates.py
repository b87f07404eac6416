"""
app/domain/aggregates.py

Value objects produced by the aggregation layer.

Every object here is created fresh per call and never shared.  All numeric
fields are raw, unformatted numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from kpi.metrics import resolve_metric


@dataclass
class MetricSums:
    """
    Running per-group accumulator of the three additive measures.

    Lives only inside one aggregation call.
    """

    sales: float = 0.0
    profit: float = 0.0
    quantity: int = 0
    count: int = 0

    def add(self, sales: float, profit: float, quantity: int) -> None:
        self.sales += sales
        self.profit += profit
        self.quantity += quantity
        self.count += 1

    def value(self, metric: str) -> float:
        return resolve_metric(self.sales, self.profit, self.quantity, metric)


@dataclass(frozen=True)
class AggregatedEntry:
    """One bar of a per-dimension breakdown."""

    name: str
    value: float
    color: str | None = None


@dataclass(frozen=True)
class CityEntry:
    """One city of a top/bottom ranking."""

    city: str
    value: float
    state: str


@dataclass(frozen=True)
class StateEntry:
    """
    Per-state sums for the map.

    Kept un-collapsed so the map can derive any metric, margin included.
    """

    state: str
    region: str
    sales: float
    profit: float
    quantity: int


@dataclass(frozen=True)
class SubcategoryEntry:
    subcategory: str
    category: str
    sales: float
    profit: float
    quantity: int
    profit_margin: float
    color: str


@dataclass(frozen=True)
class PerformanceBreakdown:
    """Category, segment, region and ship-mode breakdowns for one metric."""

    metric: str
    category: list[AggregatedEntry] = field(default_factory=list)
    segment: list[AggregatedEntry] = field(default_factory=list)
    region: list[AggregatedEntry] = field(default_factory=list)
    ship_mode: list[AggregatedEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ScorecardResult:
    """
    Portfolio totals for the current view.

    Comparison fields are ``None`` when no comparison was requested, which
    is distinct from a comparison that evaluates to zero.
    """

    total_sales: float
    total_quantity: int
    total_profit: float
    profit_margin: float
    sales_comparison: float | None = None
    """Filtered sales as a percentage of baseline sales."""
    quantity_comparison: float | None = None
    """Filtered quantity as a percentage of baseline quantity."""
    profit_comparison: float | None = None
    """Filtered profit as a percentage of baseline profit (sign follows baseline)."""
    margin_comparison: float | None = None
    """Filtered margin minus baseline margin, in percentage points."""

    @property
    def has_comparison(self) -> bool:
        return self.sales_comparison is not None


@dataclass(frozen=True)
class DiscountBucket:
    """Transactions sharing one discount level (rounded to 2 dp)."""

    discount: float
    sales: float
    profit: float
    quantity: int
    count: int
    profit_margin: float
    average_discount: float

    def value(self, metric: str) -> float:
        return resolve_metric(self.sales, self.profit, self.quantity, metric)


@dataclass(frozen=True)
class StackedShare:
    """Percentage shares of one discount bucket for a 100% stacked chart."""

    discount: float
    sales: float
    profit: float
    quantity: float
    profit_margin: float


@dataclass(frozen=True)
class AxisRanges:
    """
    Dual-axis bounds that place zero at the same height on both axes.

    ``negative_floor`` is the lowest bucket profit when any bucket is
    negative, otherwise ``None``.
    """

    left_min: float
    left_max: float
    right_min: float
    right_max: float
    negative_floor: float | None = None


@dataclass(frozen=True)
class SubcategoryDiscountStats:
    """Discount distribution of one subcategory plus its resolved metric."""

    subcategory: str
    category: str
    color: str
    mean_discount: float
    min_discount: float
    max_discount: float
    mode_discount: float
    median_discount: float
    central_discount: float
    """Either the mode or the median, as requested by the consuming view."""
    metric_value: float
    sales: float
    profit: float
    quantity: int
    bubble_size: int
