"""
app/domain package marker.
"""

from app.domain.aggregates import (
    AggregatedEntry,
    AxisRanges,
    CityEntry,
    DiscountBucket,
    MetricSums,
    PerformanceBreakdown,
    ScorecardResult,
    StackedShare,
    StateEntry,
    SubcategoryDiscountStats,
    SubcategoryEntry,
)
from app.domain.ingestion import IngestionSummary, RowValidationError
from app.domain.transaction import (
    ALL,
    DrillDown,
    DrillDownField,
    FilterCriteria,
    TransactionRecord,
    is_unrestricted,
)

__all__ = [
    "ALL",
    "AggregatedEntry",
    "AxisRanges",
    "CityEntry",
    "DiscountBucket",
    "DrillDown",
    "DrillDownField",
    "FilterCriteria",
    "IngestionSummary",
    "MetricSums",
    "PerformanceBreakdown",
    "RowValidationError",
    "ScorecardResult",
    "StackedShare",
    "StateEntry",
    "SubcategoryDiscountStats",
    "SubcategoryEntry",
    "TransactionRecord",
    "is_unrestricted",
]
