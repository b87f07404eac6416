"""
tests/test_filter_service.py

Pytest unit tests for the filter engine.

Coverage
--------
- "all" sentinel, empty string and None are no-ops
- Region and segment equality, case-sensitive
- Drill-down on each field, postal code compared as string
- AND composition of region and drill-down
- Input order preserved, unmatched values give empty results
- toggle_drill_down select / clear / replace
- DrillDown rejects unknown fields
"""

from __future__ import annotations

import pytest

from app.domain.transaction import ALL, DrillDown, DrillDownField, FilterCriteria
from app.services.filter_service import (
    apply_drill_down,
    filter_by_region,
    filter_by_segment,
    filter_records,
    toggle_drill_down,
)


def _ids(rows) -> list:
    return [row.row_id for row in rows]


class TestSentinel:
    @pytest.mark.parametrize("value", [ALL, "", None])
    def test_unrestricted_region_is_noop(self, records, value) -> None:
        assert filter_by_region(records, value) == records

    @pytest.mark.parametrize("value", [ALL, "", None])
    def test_unrestricted_segment_is_noop(self, records, value) -> None:
        assert filter_by_segment(records, value) == records

    def test_default_criteria_is_noop(self, records) -> None:
        criteria = FilterCriteria()
        assert criteria.is_unfiltered
        assert filter_records(records, criteria) == records

    def test_sentinel_is_not_matched_literally(self, make_record) -> None:
        rows = [make_record(region="all"), make_record(region="West")]
        assert len(filter_by_region(rows, ALL)) == 2

    def test_returns_new_list(self, records) -> None:
        result = filter_records(records, FilterCriteria())
        assert result is not records


class TestEquality:
    def test_region_filter(self, records) -> None:
        assert _ids(filter_by_region(records, "West")) == [1, 2, 3, 8]

    def test_segment_filter(self, records) -> None:
        assert _ids(filter_by_segment(records, "Corporate")) == [2, 6]

    def test_match_is_case_sensitive(self, records) -> None:
        assert filter_by_region(records, "west") == []

    def test_unmatched_value_gives_empty_list(self, records) -> None:
        assert filter_records(records, FilterCriteria(region="North")) == []

    def test_region_and_segment_combine_with_and(self, records) -> None:
        criteria = FilterCriteria(region="West", segment="Consumer")
        assert _ids(filter_records(records, criteria)) == [1, 3]

    def test_empty_input(self) -> None:
        assert filter_records([], FilterCriteria(region="West")) == []


class TestDrillDown:
    @pytest.mark.parametrize(
        "field, value, expected",
        [
            (DrillDownField.REGION, "East", [4, 5]),
            (DrillDownField.STATE, "California", [1, 2, 8]),
            (DrillDownField.CITY, "Los Angeles", [1, 8]),
            (DrillDownField.POSTAL_CODE, "90032", [8]),
        ],
    )
    def test_each_field(self, records, field, value, expected) -> None:
        assert _ids(apply_drill_down(records, DrillDown(field, value))) == expected

    def test_postal_code_compared_as_string(self, make_record) -> None:
        rows = [make_record(postal_code=10024)]  # type: ignore[arg-type]
        assert len(apply_drill_down(rows, DrillDown(DrillDownField.POSTAL_CODE, "10024"))) == 1

    def test_none_drill_down_is_noop(self, records) -> None:
        assert apply_drill_down(records, None) == records

    def test_region_then_city_composes_as_and(self, records) -> None:
        criteria = FilterCriteria(
            region="West", drill_down=DrillDown(DrillDownField.CITY, "Los Angeles")
        )
        result = filter_records(records, criteria)
        assert _ids(result) == [1, 8]
        assert all(r.region == "West" and r.city == "Los Angeles" for r in result)

    def test_region_and_drill_down_disjoint_gives_empty(self, records) -> None:
        criteria = FilterCriteria(
            region="East", drill_down=DrillDown(DrillDownField.CITY, "Los Angeles")
        )
        assert filter_records(records, criteria) == []

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValueError):
            DrillDown("country", "United States")


class TestToggleDrillDown:
    def test_select_from_none(self) -> None:
        result = toggle_drill_down(None, DrillDownField.STATE, "Texas")
        assert result == DrillDown(DrillDownField.STATE, "Texas")

    def test_selecting_active_value_clears(self) -> None:
        current = DrillDown(DrillDownField.STATE, "Texas")
        assert toggle_drill_down(current, DrillDownField.STATE, "Texas") is None

    def test_selecting_other_value_replaces(self) -> None:
        current = DrillDown(DrillDownField.STATE, "Texas")
        result = toggle_drill_down(current, DrillDownField.CITY, "Houston")
        assert result == DrillDown(DrillDownField.CITY, "Houston")
