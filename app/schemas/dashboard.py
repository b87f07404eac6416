"""
app/schemas/dashboard.py

Output contract handed to the presentation layer.

Every model is frozen and rejects unknown fields.  Numbers are raw; any
currency or percentage formatting happens in the consumer.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from app.services.dashboard_orchestrator import DashboardSnapshot


class _FrozenModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class AggregatedEntryResponse(_FrozenModel):
    name: str
    value: float
    color: str | None = None


class CityEntryResponse(_FrozenModel):
    city: str
    value: float
    state: str


class StateEntryResponse(_FrozenModel):
    state: str
    region: str
    sales: float
    profit: float
    quantity: int


class SubcategoryEntryResponse(_FrozenModel):
    subcategory: str
    category: str
    sales: float
    profit: float
    quantity: int
    profit_margin: float = Field(serialization_alias="profitMargin")
    color: str


class ScorecardResponse(_FrozenModel):
    """
    Comparison fields stay ``None`` when no comparison was requested.

    Dump with ``exclude_none=True`` to omit them entirely.
    """

    total_sales: float = Field(serialization_alias="totalSales")
    total_quantity: int = Field(serialization_alias="totalQuantity")
    total_profit: float = Field(serialization_alias="totalProfit")
    profit_margin: float = Field(serialization_alias="profitMargin")
    sales_comparison: float | None = Field(default=None, serialization_alias="salesComparison")
    quantity_comparison: float | None = Field(
        default=None, serialization_alias="quantityComparison"
    )
    profit_comparison: float | None = Field(default=None, serialization_alias="profitComparison")
    margin_comparison: float | None = Field(default=None, serialization_alias="marginComparison")


class PerformanceResponse(_FrozenModel):
    metric: str
    category: list[AggregatedEntryResponse] = Field(default_factory=list)
    segment: list[AggregatedEntryResponse] = Field(default_factory=list)
    region: list[AggregatedEntryResponse] = Field(default_factory=list)
    ship_mode: list[AggregatedEntryResponse] = Field(
        default_factory=list, serialization_alias="shipMode"
    )


class DiscountBucketResponse(_FrozenModel):
    discount: float
    sales: float
    profit: float
    quantity: int
    count: int = Field(ge=0)
    profit_margin: float
    average_discount: float


class StackedShareResponse(_FrozenModel):
    discount: float
    sales: float = Field(ge=0.0, le=100.0)
    profit: float = Field(ge=0.0, le=100.0)
    quantity: float = Field(ge=0.0, le=100.0)
    profit_margin: float = Field(ge=0.0, le=100.0)


class AxisRangesResponse(_FrozenModel):
    left_min: float
    left_max: float
    right_min: float
    right_max: float
    negative_floor: float | None = None


class SubcategoryDiscountStatsResponse(_FrozenModel):
    subcategory: str
    category: str
    color: str
    mean_discount: float
    min_discount: float
    max_discount: float
    mode_discount: float
    median_discount: float
    central_discount: float
    metric_value: float
    sales: float
    profit: float
    quantity: int
    bubble_size: int


class DrillDownResponse(_FrozenModel):
    field: Literal["region", "state", "city", "postal_code"]
    value: str


class FilterCriteriaResponse(_FrozenModel):
    region: str | None = None
    segment: str | None = None
    drill_down: DrillDownResponse | None = None


class DashboardSnapshotResponse(_FrozenModel):
    criteria: FilterCriteriaResponse
    metric: Literal["sales", "profit", "quantity", "profitMargin"]
    row_count: int = Field(ge=0)
    scorecard: ScorecardResponse
    performance: PerformanceResponse
    top_cities: list[CityEntryResponse] = Field(default_factory=list)
    bottom_cities: list[CityEntryResponse] = Field(default_factory=list)
    states: list[StateEntryResponse] = Field(default_factory=list)
    subcategories: list[SubcategoryEntryResponse] = Field(default_factory=list)
    discount_buckets: list[DiscountBucketResponse] = Field(default_factory=list)
    stacked_shares: list[StackedShareResponse] = Field(default_factory=list)
    axis_ranges: AxisRangesResponse | None = None
    discount_distribution: list[SubcategoryDiscountStatsResponse] = Field(default_factory=list)
    computed_at: datetime

    @classmethod
    def from_snapshot(cls, snapshot: DashboardSnapshot) -> DashboardSnapshotResponse:
        """Validate a :class:`DashboardSnapshot` into the response contract."""
        return cls.model_validate(asdict(snapshot))
