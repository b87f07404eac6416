"""
app/schemas package marker.
"""

from app.schemas.dashboard import (
    AggregatedEntryResponse,
    AxisRangesResponse,
    CityEntryResponse,
    DashboardSnapshotResponse,
    DiscountBucketResponse,
    PerformanceResponse,
    ScorecardResponse,
    StackedShareResponse,
    StateEntryResponse,
    SubcategoryDiscountStatsResponse,
    SubcategoryEntryResponse,
)

__all__ = [
    "AggregatedEntryResponse",
    "AxisRangesResponse",
    "CityEntryResponse",
    "DashboardSnapshotResponse",
    "DiscountBucketResponse",
    "PerformanceResponse",
    "ScorecardResponse",
    "StackedShareResponse",
    "StateEntryResponse",
    "SubcategoryDiscountStatsResponse",
    "SubcategoryEntryResponse",
]
