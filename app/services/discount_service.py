"""
app/services/discount_service.py

Discount bucketing and discount-distribution engine.

Two independent aggregations share the same input:

    bucket_by_discount                 – groups rows by discount rounded to
                                         2 dp, sums measures, counts rows
    subcategory_discount_distribution  – per subcategory discount mean, min,
                                         max, mode and median plus the
                                         subcategory's resolved metric

Derived views over the buckets:

    stacked_shares       – per-bucket percentage shares of |profit|, |sales|,
                           quantity and |margin|; 25% each when all are zero
    aligned_axis_ranges  – dual-axis bounds for the revenue / quantity chart
                           with both zero lines at the same height

Bucket ``average_discount`` is the running mean of the raw discounts that
fell into the bucket.  For source data with at most two decimals it equals
the bucket's rounded level exactly.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable

from app.domain.aggregates import (
    AxisRanges,
    DiscountBucket,
    MetricSums,
    StackedShare,
    SubcategoryDiscountStats,
)
from app.domain.lookups import CATEGORY_COLORS, DEFAULT_COLOR, parent_category
from app.domain.transaction import TransactionRecord
from kpi import statistics
from kpi.base import validate_metric
from kpi.metrics import profit_margin
from kpi.statistics import ALLOWED_DISCOUNT_STATISTICS, DiscountStatistic

logger = logging.getLogger(__name__)

# Upper bounds for the left and right axis minima.
LEFT_AXIS_FLOOR: float = -50_000.0
RIGHT_AXIS_FLOOR: float = -5_000.0
AXIS_HEADROOM: float = 1.1

_EVEN_SHARE: float = 25.0

_BUBBLE_MIN: int = 5
_BUBBLE_SPAN: int = 50


@dataclass
class _DiscountAccumulator:
    sums: MetricSums = field(default_factory=MetricSums)
    discounts: list[float] = field(default_factory=list)
    category: str = ""


def _bubble_size(sales: float, max_sales: float) -> int:
    """Scale sales into the 5..55 bubble range; minimum size when max is not positive."""
    if max_sales <= 0:
        return _BUBBLE_MIN
    return math.floor(sales / max_sales * _BUBBLE_SPAN + 0.5) + _BUBBLE_MIN


class DiscountService:
    """
    Stateless discount analysis engine.
    """

    # ------------------------------------------------------------------
    # Discount-level buckets
    # ------------------------------------------------------------------

    def bucket_by_discount(self, records: Iterable[TransactionRecord]) -> list[DiscountBucket]:
        """
        Group records by discount level (rounded half-up to 2 dp).

        Returns
        -------
        list[DiscountBucket]
            One bucket per level, ascending by discount.  Empty for empty
            input.
        """
        buckets: dict[float, _DiscountAccumulator] = {}
        for record in records:
            level = statistics.round_discount(record.discount)
            acc = buckets.get(level)
            if acc is None:
                acc = buckets[level] = _DiscountAccumulator()
            acc.sums.add(record.sales, record.profit, record.quantity)
            acc.discounts.append(record.discount)

        result = [
            DiscountBucket(
                discount=level,
                sales=acc.sums.sales,
                profit=acc.sums.profit,
                quantity=acc.sums.quantity,
                count=acc.sums.count,
                profit_margin=profit_margin(acc.sums.sales, acc.sums.profit),
                average_discount=statistics.mean(acc.discounts),
            )
            for level, acc in buckets.items()
        ]
        result.sort(key=lambda bucket: bucket.discount)
        logger.debug("bucket_by_discount -> %d buckets", len(result))
        return result

    def stacked_shares(self, buckets: Iterable[DiscountBucket]) -> list[StackedShare]:
        """
        Convert each bucket into percentage shares for a 100% stacked chart.

        Profit, sales and margin enter as absolute values because profit
        (and therefore margin) can be negative.  When all four magnitudes
        are zero every share is exactly 25.0.
        """
        shares = []
        for bucket in buckets:
            abs_profit = abs(bucket.profit)
            abs_sales = abs(bucket.sales)
            abs_quantity = bucket.quantity
            abs_margin = abs(bucket.profit_margin)
            total = abs_profit + abs_sales + abs_quantity + abs_margin
            if total == 0:
                shares.append(
                    StackedShare(
                        discount=bucket.discount,
                        sales=_EVEN_SHARE,
                        profit=_EVEN_SHARE,
                        quantity=_EVEN_SHARE,
                        profit_margin=_EVEN_SHARE,
                    )
                )
                continue
            shares.append(
                StackedShare(
                    discount=bucket.discount,
                    sales=abs_sales / total * 100,
                    profit=abs_profit / total * 100,
                    quantity=abs_quantity / total * 100,
                    profit_margin=abs_margin / total * 100,
                )
            )
        return shares

    # ------------------------------------------------------------------
    # Chart scaling
    # ------------------------------------------------------------------

    @staticmethod
    def has_negative_profit(buckets: Iterable[DiscountBucket]) -> bool:
        return any(bucket.profit < 0 for bucket in buckets)

    def aligned_axis_ranges(self, buckets: Iterable[DiscountBucket]) -> AxisRanges:
        """
        Compute left (revenue) and right (quantity) axis bounds.

        The right axis minimum is stretched so that its zero sits at the
        same relative height as the left axis zero.

        Formulas
        --------
        left_min   = min(1.1 * min_profit, -50000) if any profit < 0 else -50000
        left_max   = 1.1 * max(max(|profit|, sales))
        zero_ratio = |left_min| / (|left_min| + left_max)
        right_max  = 1.1 * max(quantity)
        right_min  = min(-(right_max * zero_ratio / (1 - zero_ratio)), -5000)
        """
        rows = list(buckets)
        min_profit = min([0.0, *(bucket.profit for bucket in rows)])
        negative = self.has_negative_profit(rows)
        max_revenue = max((max(abs(b.profit), b.sales) for b in rows), default=0.0)
        max_quantity = max((b.quantity for b in rows), default=0)

        left_min = min(min_profit * AXIS_HEADROOM, LEFT_AXIS_FLOOR) if negative else LEFT_AXIS_FLOOR
        left_max = max_revenue * AXIS_HEADROOM
        zero_ratio = abs(left_min) / (abs(left_min) + left_max) if left_min < 0 else 0.0
        right_max = max_quantity * AXIS_HEADROOM
        right_min = -(right_max * zero_ratio / (1 - zero_ratio)) if 0 < zero_ratio < 1 else 0.0

        return AxisRanges(
            left_min=left_min,
            left_max=left_max,
            right_min=min(right_min, RIGHT_AXIS_FLOOR),
            right_max=right_max,
            negative_floor=min_profit if negative else None,
        )

    # ------------------------------------------------------------------
    # Subcategory distributions
    # ------------------------------------------------------------------

    def subcategory_discount_distribution(
        self,
        records: Iterable[TransactionRecord],
        metric: str,
        statistic: str = DiscountStatistic.MEDIAN,
    ) -> list[SubcategoryDiscountStats]:
        """
        Summarise each subcategory's discount distribution.

        Parameters
        ----------
        records:
            Filtered transaction records.
        metric:
            Metric resolved from each subcategory's summed measures.
        statistic:
            ``"median"`` or ``"mode"``; selects ``central_discount``.  Both
            statistics are always reported.

        Returns
        -------
        list[SubcategoryDiscountStats]
            One entry per subcategory in first-seen order.

        Raises
        ------
        ValueError
            If *statistic* is not a known discount statistic.
        """
        validate_metric(metric)
        if statistic not in ALLOWED_DISCOUNT_STATISTICS:
            raise ValueError(
                f"Unknown discount statistic {statistic!r}. "
                f"Valid statistics: {sorted(ALLOWED_DISCOUNT_STATISTICS)}"
            )

        groups: dict[str, _DiscountAccumulator] = {}
        for record in records:
            acc = groups.get(record.sub_category)
            if acc is None:
                category = parent_category(record.sub_category) or record.category
                acc = groups[record.sub_category] = _DiscountAccumulator(category=category)
            acc.sums.add(record.sales, record.profit, record.quantity)
            acc.discounts.append(record.discount)

        max_sales = max((acc.sums.sales for acc in groups.values()), default=0.0)
        result = []
        for subcategory, acc in groups.items():
            mode_value = statistics.mode([statistics.round_discount(d) for d in acc.discounts])
            median_value = statistics.median(acc.discounts)
            result.append(
                SubcategoryDiscountStats(
                    subcategory=subcategory,
                    category=acc.category,
                    color=CATEGORY_COLORS.get(acc.category, DEFAULT_COLOR),
                    mean_discount=statistics.mean(acc.discounts),
                    min_discount=statistics.minimum(acc.discounts),
                    max_discount=statistics.maximum(acc.discounts),
                    mode_discount=mode_value,
                    median_discount=median_value,
                    central_discount=(
                        mode_value if statistic == DiscountStatistic.MODE else median_value
                    ),
                    metric_value=acc.sums.value(metric),
                    sales=acc.sums.sales,
                    profit=acc.sums.profit,
                    quantity=acc.sums.quantity,
                    bubble_size=_bubble_size(acc.sums.sales, max_sales),
                )
            )
        return result
