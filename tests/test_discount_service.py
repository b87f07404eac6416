"""
tests/test_discount_service.py

Pytest unit tests for DiscountService.

Coverage
--------
- Buckets by rounded discount level, ascending, with counts and margins
- Stacked shares, including the all-zero 25% case
- Aligned dual-axis ranges with and without negative profit
- Subcategory discount distribution: mean / min / max / mode / median,
  central statistic selection, metric value and bubble size
- Empty inputs and invalid selectors
"""

from __future__ import annotations

import pytest

from app.domain.aggregates import DiscountBucket
from app.domain.lookups import CATEGORY_COLORS
from app.services.discount_service import (
    LEFT_AXIS_FLOOR,
    RIGHT_AXIS_FLOOR,
    DiscountService,
)
from kpi.base import Metric, UnknownMetricError
from kpi.statistics import DiscountStatistic


@pytest.fixture()
def svc() -> DiscountService:
    return DiscountService()


def _bucket(discount: float, sales: float, profit: float, quantity: int) -> DiscountBucket:
    margin = profit / sales * 100 if sales > 0 else 0.0
    return DiscountBucket(
        discount=discount,
        sales=sales,
        profit=profit,
        quantity=quantity,
        count=1,
        profit_margin=margin,
        average_discount=discount,
    )


# ---------------------------------------------------------------------------
# Buckets
# ---------------------------------------------------------------------------


class TestBucketByDiscount:
    def test_levels_ascending(self, svc: DiscountService, records) -> None:
        result = svc.bucket_by_discount(records)
        assert [b.discount for b in result] == pytest.approx([0.0, 0.2, 0.3])

    def test_bucket_sums_and_count(self, svc: DiscountService, records) -> None:
        zero, twenty, thirty = svc.bucket_by_discount(records)
        assert zero.sales == pytest.approx(1250.0)
        assert zero.profit == pytest.approx(250.0)
        assert zero.quantity == 15
        assert zero.count == 4
        assert zero.profit_margin == pytest.approx(20.0)
        assert twenty.count == 3
        assert twenty.profit == pytest.approx(20.0)
        assert thirty.profit_margin == pytest.approx(-20.0)

    def test_nearby_discounts_share_a_bucket(self, svc: DiscountService, make_record) -> None:
        rows = [make_record(discount=0.199), make_record(discount=0.2)]
        result = svc.bucket_by_discount(rows)
        assert len(result) == 1
        assert result[0].discount == pytest.approx(0.2)
        assert result[0].count == 2
        assert result[0].average_discount == pytest.approx(0.1995)

    def test_average_equals_level_for_two_decimal_data(self, svc, records) -> None:
        for bucket in svc.bucket_by_discount(records):
            assert bucket.average_discount == pytest.approx(bucket.discount)

    def test_bucket_value_resolves_metric(self, svc: DiscountService, records) -> None:
        zero = svc.bucket_by_discount(records)[0]
        assert zero.value(Metric.QUANTITY) == 15
        assert zero.value(Metric.PROFIT_MARGIN) == pytest.approx(20.0)

    def test_counts_sum_to_row_count(self, svc: DiscountService, records) -> None:
        assert sum(b.count for b in svc.bucket_by_discount(records)) == len(records)

    def test_empty_input(self, svc: DiscountService) -> None:
        assert svc.bucket_by_discount([]) == []


# ---------------------------------------------------------------------------
# Stacked shares
# ---------------------------------------------------------------------------


class TestStackedShares:
    def test_all_zero_bucket_gives_even_split(self, svc: DiscountService) -> None:
        (share,) = svc.stacked_shares([_bucket(0.5, 0.0, 0.0, 0)])
        assert share.sales == 25.0
        assert share.profit == 25.0
        assert share.quantity == 25.0
        assert share.profit_margin == 25.0

    def test_uses_absolute_values(self, svc: DiscountService) -> None:
        (share,) = svc.stacked_shares([_bucket(0.3, 100.0, -20.0, 2)])
        total = 100.0 + 20.0 + 2 + 20.0
        assert share.sales == pytest.approx(100.0 / total * 100)
        assert share.profit == pytest.approx(20.0 / total * 100)
        assert share.quantity == pytest.approx(2 / total * 100)
        assert share.profit_margin == pytest.approx(20.0 / total * 100)

    def test_shares_sum_to_hundred(self, svc: DiscountService, records) -> None:
        for share in svc.stacked_shares(svc.bucket_by_discount(records)):
            total = share.sales + share.profit + share.quantity + share.profit_margin
            assert total == pytest.approx(100.0)

    def test_empty_input(self, svc: DiscountService) -> None:
        assert svc.stacked_shares([]) == []


# ---------------------------------------------------------------------------
# Axis ranges
# ---------------------------------------------------------------------------


class TestAlignedAxisRanges:
    def test_small_values_use_floors(self, svc: DiscountService, records) -> None:
        ranges = svc.aligned_axis_ranges(svc.bucket_by_discount(records))
        assert ranges.left_min == LEFT_AXIS_FLOOR
        assert ranges.left_max == pytest.approx(1375.0)
        assert ranges.right_max == pytest.approx(16.5)
        assert ranges.right_min == RIGHT_AXIS_FLOOR
        assert ranges.negative_floor == pytest.approx(-20.0)

    def test_large_negative_profit_aligns_zero(self, svc: DiscountService) -> None:
        buckets = [
            _bucket(0.0, 200_000.0, 50_000.0, 30_000),
            _bucket(0.5, 100_000.0, -100_000.0, 1_000),
        ]
        ranges = svc.aligned_axis_ranges(buckets)
        assert ranges.left_min == pytest.approx(-110_000.0)
        assert ranges.left_max == pytest.approx(220_000.0)
        assert ranges.right_max == pytest.approx(33_000.0)
        assert ranges.right_min == pytest.approx(-16_500.0)
        left_zero = abs(ranges.left_min) / (abs(ranges.left_min) + ranges.left_max)
        right_zero = abs(ranges.right_min) / (abs(ranges.right_min) + ranges.right_max)
        assert left_zero == pytest.approx(right_zero)

    def test_no_negative_profit(self, svc: DiscountService) -> None:
        ranges = svc.aligned_axis_ranges([_bucket(0.0, 100.0, 10.0, 5)])
        assert ranges.left_min == LEFT_AXIS_FLOOR
        assert ranges.negative_floor is None
        assert not svc.has_negative_profit([_bucket(0.0, 100.0, 10.0, 5)])

    def test_empty_input(self, svc: DiscountService) -> None:
        ranges = svc.aligned_axis_ranges([])
        assert ranges.left_min == LEFT_AXIS_FLOOR
        assert ranges.left_max == 0.0
        assert ranges.right_max == 0.0
        assert ranges.right_min == RIGHT_AXIS_FLOOR
        assert ranges.negative_floor is None


# ---------------------------------------------------------------------------
# Subcategory distribution
# ---------------------------------------------------------------------------


class TestSubcategoryDiscountDistribution:
    def test_first_seen_order(self, svc: DiscountService, records) -> None:
        result = svc.subcategory_discount_distribution(records, Metric.PROFIT)
        assert [s.subcategory for s in result] == [
            "Phones",
            "Tables",
            "Binders",
            "Chairs",
            "Storage",
            "Paper",
        ]

    def test_four_row_median_and_mode(self, svc: DiscountService, make_record) -> None:
        rows = [
            make_record(sub_category="Binders", discount=d, sales=10.0)
            for d in (0.0, 0.1, 0.1, 0.2)
        ]
        (stats,) = svc.subcategory_discount_distribution(rows, Metric.SALES)
        assert stats.median_discount == pytest.approx(0.1)
        assert stats.mode_discount == pytest.approx(0.1)
        assert stats.mean_discount == pytest.approx(0.1)
        assert stats.min_discount == 0.0
        assert stats.max_discount == pytest.approx(0.2)
        assert stats.metric_value == pytest.approx(40.0)

    def test_distinct_values_mode_is_first_seen(self, svc: DiscountService, make_record) -> None:
        rows = [make_record(sub_category="Art", discount=d) for d in (0.0, 0.1, 0.2)]
        (stats,) = svc.subcategory_discount_distribution(rows, Metric.SALES, DiscountStatistic.MODE)
        assert stats.mode_discount == 0.0
        assert stats.central_discount == 0.0

    def test_central_statistic_selection(self, svc: DiscountService, records) -> None:
        by_median = {
            s.subcategory: s
            for s in svc.subcategory_discount_distribution(records, Metric.PROFIT)
        }
        by_mode = {
            s.subcategory: s
            for s in svc.subcategory_discount_distribution(
                records, Metric.PROFIT, DiscountStatistic.MODE
            )
        }
        assert by_median["Paper"].central_discount == pytest.approx(0.1)
        assert by_mode["Paper"].central_discount == pytest.approx(0.2)

    def test_bubble_size_scales_with_sales(self, svc: DiscountService, records) -> None:
        result = {
            s.subcategory: s
            for s in svc.subcategory_discount_distribution(records, Metric.PROFIT)
        }
        assert result["Phones"].bubble_size == 55
        assert result["Tables"].bubble_size == 22
        assert result["Paper"].bubble_size == 19

    def test_bubble_size_minimum_when_no_sales(self, svc: DiscountService, make_record) -> None:
        rows = [make_record(sub_category="Labels", sales=0.0)]
        (stats,) = svc.subcategory_discount_distribution(rows, Metric.SALES)
        assert stats.bubble_size == 5

    def test_category_and_colour(self, svc: DiscountService, records) -> None:
        phones = svc.subcategory_discount_distribution(records, Metric.PROFIT)[0]
        assert phones.category == "Technology"
        assert phones.color == CATEGORY_COLORS["Technology"]
        assert phones.metric_value == pytest.approx(180.0)

    def test_margin_metric_from_sums(self, svc: DiscountService, records) -> None:
        result = {
            s.subcategory: s
            for s in svc.subcategory_discount_distribution(records, Metric.PROFIT_MARGIN)
        }
        assert result["Paper"].metric_value == pytest.approx(60.0 / 250.0 * 100)

    def test_empty_input(self, svc: DiscountService) -> None:
        assert svc.subcategory_discount_distribution([], Metric.SALES) == []

    def test_unknown_statistic_raises(self, svc: DiscountService, records) -> None:
        with pytest.raises(ValueError):
            svc.subcategory_discount_distribution(records, Metric.SALES, "mean")

    def test_unknown_metric_raises(self, svc: DiscountService, records) -> None:
        with pytest.raises(UnknownMetricError):
            svc.subcategory_discount_distribution(records, "orders")
