"""
app/services/dashboard_orchestrator.py

Dashboard pipeline orchestrator.

Wires the filter engine and every aggregation into a single synchronous
run.  No business logic lives here; every layer retains its own
responsibility:

    filter_service        – region / segment / drill-down predicates
    ScorecardService      – totals and comparisons against the full dataset
    AggregationService    – per-dimension breakdowns, state and subcategory sums
    RankingService        – top / bottom city rankings
    DiscountService       – discount buckets, stacked shares, axis ranges,
                            subcategory discount distributions

The orchestrator keeps no state between runs.  It is re-invoked in full
whenever a selector changes; callers may cache snapshots keyed by
(dataset, criteria, metric) but no caching happens here.

Failure contract
----------------
- Unknown metric             → raises UnknownMetricError before any work
- Unknown discount statistic → raises ValueError before any work
- Invalid rank limit         → raises ValueError before any work
- Empty data                 → a snapshot of empty lists and zero totals
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Sequence

from app.config import DashboardSettings, get_dashboard_settings
from app.domain.aggregates import (
    AxisRanges,
    CityEntry,
    DiscountBucket,
    PerformanceBreakdown,
    ScorecardResult,
    StackedShare,
    StateEntry,
    SubcategoryDiscountStats,
    SubcategoryEntry,
)
from app.domain.transaction import FilterCriteria, TransactionRecord
from app.logging_utils import log_event
from app.services.aggregation_service import AggregationService
from app.services.discount_service import DiscountService
from app.services.filter_service import filter_records
from app.services.ranking_service import RankingService, RankMode
from app.services.scorecard_service import ScorecardService
from kpi.base import validate_metric
from kpi.statistics import ALLOWED_DISCOUNT_STATISTICS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DashboardSnapshot:
    """
    Every view of the dashboard computed for one set of selectors.

    Attributes
    ----------
    criteria:
        Selectors the snapshot was computed for.
    metric:
        Active metric selector.
    row_count:
        Number of records that survived filtering.
    scorecard:
        Totals for the filtered view; comparisons only for a specific region.
    performance:
        Category, segment, region and ship-mode breakdowns.
    top_cities / bottom_cities:
        City rankings by the active metric.
    states:
        Un-collapsed per-state sums for the map.
    subcategories:
        Per-subcategory sums, descending by profit.
    discount_buckets / stacked_shares / axis_ranges:
        Discount-level series and their derived views.
    discount_distribution:
        Per-subcategory discount statistics.
    computed_at:
        UTC timestamp when the run completed.
    """

    criteria: FilterCriteria
    metric: str
    row_count: int
    scorecard: ScorecardResult
    performance: PerformanceBreakdown
    top_cities: list[CityEntry] = field(default_factory=list)
    bottom_cities: list[CityEntry] = field(default_factory=list)
    states: list[StateEntry] = field(default_factory=list)
    subcategories: list[SubcategoryEntry] = field(default_factory=list)
    discount_buckets: list[DiscountBucket] = field(default_factory=list)
    stacked_shares: list[StackedShare] = field(default_factory=list)
    axis_ranges: AxisRanges | None = None
    discount_distribution: list[SubcategoryDiscountStats] = field(default_factory=list)
    computed_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class DashboardOrchestrator:
    """
    Coordinates the full filter → aggregate pipeline for one interaction.

    Parameters
    ----------
    settings:
        Dashboard settings; env-driven defaults are used when omitted.
    """

    def __init__(
        self,
        settings: DashboardSettings | None = None,
        *,
        aggregation: AggregationService | None = None,
        scorecard: ScorecardService | None = None,
        ranking: RankingService | None = None,
        discount: DiscountService | None = None,
    ) -> None:
        self._settings = settings or get_dashboard_settings()
        self._aggregation = aggregation or AggregationService()
        self._scorecard = scorecard or ScorecardService()
        self._ranking = ranking or RankingService(self._aggregation)
        self._discount = discount or DiscountService()

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    def run(
        self,
        records: Sequence[TransactionRecord],
        criteria: FilterCriteria | None = None,
        metric: str | None = None,
        *,
        rank_limit: int | None = None,
        discount_statistic: str | None = None,
    ) -> DashboardSnapshot:
        """
        Compute every dashboard view for *records* under *criteria*.

        Steps
        -----
        1. Validate the metric, discount statistic and rank limit.
        2. Filter records (region AND segment AND drill-down).
        3. Scorecard against the unfiltered records.
        4. Breakdowns, rankings, map and subcategory sums.
        5. Discount buckets and their derived views.

        Parameters
        ----------
        records:
            Full, well-formed dataset; also the scorecard baseline.
        criteria:
            Active selectors; no filtering when omitted.
        metric:
            Metric selector; defaults to ``settings.default_metric``.
        rank_limit:
            Cities per ranking; defaults to ``settings.city_rank_limit``.
        discount_statistic:
            ``"median"`` or ``"mode"``; defaults to
            ``settings.discount_statistic``.

        Raises
        ------
        kpi.base.UnknownMetricError
            If *metric* is not a known selector.
        ValueError
            If the discount statistic or rank limit is invalid.
        """
        criteria = criteria or FilterCriteria()
        metric = validate_metric(metric or self._settings.default_metric)
        statistic = discount_statistic or self._settings.discount_statistic
        if statistic not in ALLOWED_DISCOUNT_STATISTICS:
            raise ValueError(
                f"Unknown discount statistic {statistic!r}. "
                f"Valid statistics: {sorted(ALLOWED_DISCOUNT_STATISTICS)}"
            )
        limit = rank_limit if rank_limit is not None else self._settings.city_rank_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"rank_limit must be a positive integer; got {limit!r}")

        run_start = time.monotonic()
        logger.info(
            "DashboardOrchestrator.run started rows=%d metric=%r region=%r segment=%r",
            len(records),
            metric,
            criteria.region,
            criteria.segment,
        )

        filtered = filter_records(records, criteria)

        scorecard = self._scorecard.calculate(filtered, criteria.region, records)
        performance = self._aggregation.performance_breakdown(filtered, metric)
        top_cities = self._ranking.rank_cities(filtered, metric, RankMode.TOP, limit)
        bottom_cities = self._ranking.rank_cities(filtered, metric, RankMode.BOTTOM, limit)
        states = self._aggregation.aggregate_by_state(filtered)
        subcategories = self._aggregation.aggregate_by_subcategory(filtered)

        buckets = self._discount.bucket_by_discount(filtered)
        shares = self._discount.stacked_shares(buckets)
        axis_ranges = self._discount.aligned_axis_ranges(buckets)
        distribution = self._discount.subcategory_discount_distribution(
            filtered, metric, statistic
        )

        snapshot = DashboardSnapshot(
            criteria=criteria,
            metric=metric,
            row_count=len(filtered),
            scorecard=scorecard,
            performance=performance,
            top_cities=top_cities,
            bottom_cities=bottom_cities,
            states=states,
            subcategories=subcategories,
            discount_buckets=buckets,
            stacked_shares=shares,
            axis_ranges=axis_ranges,
            discount_distribution=distribution,
        )

        log_event(
            logger,
            logging.INFO,
            "dashboard_run_completed",
            metric=metric,
            region=criteria.region,
            segment=criteria.segment,
            drill_down=criteria.drill_down,
            rows_in=len(records),
            rows_filtered=len(filtered),
            elapsed_ms=round((time.monotonic() - run_start) * 1000, 2),
        )
        return snapshot
