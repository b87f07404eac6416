"""
app/services/aggregation_service.py

Dimensional aggregation layer.

Groups transaction records by a categorical dimension and reduces each
group to summed sales, profit and quantity.  The metric resolver is then
applied once per group, so profit margin is always computed from the
group's summed sales and profit, never as an average of per-row margins.

Ordering
--------
Metric-collapsed breakdowns are sorted descending by value.  Python's sort
is stable, so ties keep first-encountered key order.

    by category / segment / region / ship mode  → descending by metric value
    by city                                     → descending by metric value
    by state                                    → first-seen order, un-collapsed
    by subcategory                              → descending by *profit*,
                                                  independent of the metric

No filtering lives here.  Callers pass an already-filtered collection.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping

from app.domain.aggregates import (
    AggregatedEntry,
    CityEntry,
    MetricSums,
    PerformanceBreakdown,
    StateEntry,
    SubcategoryEntry,
)
from app.domain.lookups import (
    CATEGORY_COLORS,
    DEFAULT_COLOR,
    REGION_COLORS,
    SEGMENT_COLORS,
    SHIP_MODE_COLORS,
    parent_category,
)
from app.domain.transaction import TransactionRecord
from kpi.base import validate_metric
from kpi.metrics import profit_margin

logger = logging.getLogger(__name__)

KeyFn = Callable[[TransactionRecord], str]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _accumulate(
    records: Iterable[TransactionRecord], key_fn: KeyFn
) -> tuple[dict[str, MetricSums], dict[str, TransactionRecord]]:
    """
    Single pass building ``key -> MetricSums`` plus the first row per key.

    The first row is kept so passthrough attributes (a city's state, a
    state's region) can be read without a second scan.
    """
    sums: dict[str, MetricSums] = {}
    first_rows: dict[str, TransactionRecord] = {}
    for record in records:
        key = key_fn(record)
        bucket = sums.get(key)
        if bucket is None:
            bucket = sums[key] = MetricSums()
            first_rows[key] = record
        bucket.add(record.sales, record.profit, record.quantity)
    return sums, first_rows


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class AggregationService:
    """
    Stateless per-dimension aggregation engine.

    Usage::

        service = AggregationService()
        bars = service.aggregate_by_category(records, "profit")
    """

    # ------------------------------------------------------------------
    # Generic
    # ------------------------------------------------------------------

    def aggregate_by(
        self,
        records: Iterable[TransactionRecord],
        key_fn: KeyFn,
        metric: str,
        colors: Mapping[str, str] | None = None,
    ) -> list[AggregatedEntry]:
        """
        Group *records* by ``key_fn(record)`` and resolve *metric* per group.

        Parameters
        ----------
        records:
            Filtered transaction records.
        key_fn:
            Extracts the grouping key from a record.
        metric:
            Metric selector applied to each group's sums.
        colors:
            Optional key -> colour lookup.  Keys missing from it get
            :data:`DEFAULT_COLOR`; with no lookup the colour is ``None``.

        Returns
        -------
        list[AggregatedEntry]
            Sorted descending by value.  Empty for empty input.
        """
        validate_metric(metric)
        sums, _ = _accumulate(records, key_fn)
        entries = [
            AggregatedEntry(
                name=key,
                value=bucket.value(metric),
                color=None if colors is None else colors.get(key, DEFAULT_COLOR),
            )
            for key, bucket in sums.items()
        ]
        entries.sort(key=lambda entry: entry.value, reverse=True)
        logger.debug("aggregate_by metric=%r -> %d groups", metric, len(entries))
        return entries

    # ------------------------------------------------------------------
    # Categorical breakdowns
    # ------------------------------------------------------------------

    def aggregate_by_category(
        self, records: Iterable[TransactionRecord], metric: str
    ) -> list[AggregatedEntry]:
        return self.aggregate_by(records, lambda r: r.category, metric, CATEGORY_COLORS)

    def aggregate_by_segment(
        self, records: Iterable[TransactionRecord], metric: str
    ) -> list[AggregatedEntry]:
        return self.aggregate_by(records, lambda r: r.segment, metric, SEGMENT_COLORS)

    def aggregate_by_region(
        self, records: Iterable[TransactionRecord], metric: str
    ) -> list[AggregatedEntry]:
        return self.aggregate_by(records, lambda r: r.region, metric, REGION_COLORS)

    def aggregate_by_ship_mode(
        self, records: Iterable[TransactionRecord], metric: str
    ) -> list[AggregatedEntry]:
        return self.aggregate_by(records, lambda r: r.ship_mode, metric, SHIP_MODE_COLORS)

    def performance_breakdown(
        self, records: Iterable[TransactionRecord], metric: str
    ) -> PerformanceBreakdown:
        """Category, segment, region and ship-mode breakdowns in one call."""
        rows = list(records)
        return PerformanceBreakdown(
            metric=metric,
            category=self.aggregate_by_category(rows, metric),
            segment=self.aggregate_by_segment(rows, metric),
            region=self.aggregate_by_region(rows, metric),
            ship_mode=self.aggregate_by_ship_mode(rows, metric),
        )

    # ------------------------------------------------------------------
    # Geographic
    # ------------------------------------------------------------------

    def aggregate_by_city(
        self, records: Iterable[TransactionRecord], metric: str
    ) -> list[CityEntry]:
        """
        Per-city metric values, descending.

        ``state`` is taken from the first row seen for each city; city names
        are assumed unique per state in this dataset.
        """
        validate_metric(metric)
        sums, first_rows = _accumulate(records, lambda r: r.city)
        entries = [
            CityEntry(city=city, value=bucket.value(metric), state=first_rows[city].state)
            for city, bucket in sums.items()
        ]
        entries.sort(key=lambda entry: entry.value, reverse=True)
        return entries

    def aggregate_by_state(self, records: Iterable[TransactionRecord]) -> list[StateEntry]:
        """
        Per-state sums for the map, in first-seen order.

        Values are not metric-collapsed so the consumer can derive any
        metric, margin included, on demand.
        """
        sums, first_rows = _accumulate(records, lambda r: r.state)
        return [
            StateEntry(
                state=state,
                region=first_rows[state].region,
                sales=bucket.sales,
                profit=bucket.profit,
                quantity=bucket.quantity,
            )
            for state, bucket in sums.items()
        ]

    # ------------------------------------------------------------------
    # Subcategory
    # ------------------------------------------------------------------

    def aggregate_by_subcategory(
        self, records: Iterable[TransactionRecord]
    ) -> list[SubcategoryEntry]:
        """
        Per-subcategory sums, margin and parent category.

        Always sorted descending by profit, whatever metric the view has
        selected.  The parent category comes from the static lookup and
        falls back to the first row's category for unmapped subcategories.
        """
        sums, first_rows = _accumulate(records, lambda r: r.sub_category)
        entries = []
        for subcategory, bucket in sums.items():
            category = parent_category(subcategory) or first_rows[subcategory].category
            entries.append(
                SubcategoryEntry(
                    subcategory=subcategory,
                    category=category,
                    sales=bucket.sales,
                    profit=bucket.profit,
                    quantity=bucket.quantity,
                    profit_margin=profit_margin(bucket.sales, bucket.profit),
                    color=CATEGORY_COLORS.get(category, DEFAULT_COLOR),
                )
            )
        entries.sort(key=lambda entry: entry.profit, reverse=True)
        return entries
