"""
tests/test_export_service.py

Pytest unit tests for DashboardExportService.

Coverage
--------
- Every dataset builds with a deterministic column list
- Summary rows carry filter labels and formatted totals
- Dimension datasets label the metric column
- CSV rendering
- Unknown dataset and unknown metric
"""

from __future__ import annotations

import pytest

from app.domain.transaction import ALL
from app.services.export_service import DashboardExportService, ExportResult, to_csv
from kpi.base import Metric, UnknownMetricError


@pytest.fixture()
def svc() -> DashboardExportService:
    return DashboardExportService()


class TestBuild:
    @pytest.mark.parametrize(
        "dataset, expected_fields",
        [
            ("summary", ["Metric", "Value"]),
            (
                "raw",
                [
                    "Order ID", "Ship Mode", "Segment", "Country", "City", "State",
                    "Region", "Category", "Sub-Category", "Sales", "Quantity",
                    "Discount", "Profit",
                ],
            ),
            ("states", ["State", "Region", "Profit", "Sales", "Quantity"]),
            (
                "subcategories",
                ["Sub-Category", "Category", "Profit", "Sales", "Quantity", "Profit Margin (%)"],
            ),
            ("categories", ["Category", "Profit"]),
            ("segments", ["Segment", "Profit"]),
            ("regions", ["Region", "Profit"]),
            ("ship_modes", ["Ship Mode", "Profit"]),
        ],
    )
    def test_fields(self, svc, records, dataset: str, expected_fields: list[str]) -> None:
        result = svc.build(dataset, records)
        assert isinstance(result, ExportResult)
        assert result.fields == expected_fields
        assert result.rows

    def test_summary_values(self, svc, records) -> None:
        result = svc.build("summary", records, selected_region="West", selected_segment=ALL)
        values = {row["Metric"]: row["Value"] for row in result.rows}
        assert values["Region Filter"] == "West"
        assert values["Segment Filter"] == "All Segments"
        assert values["Total Sales"] == "$2.0K"
        assert values["Total Profit"] == "$250"
        assert values["Total Quantity"] == "28"
        assert values["Profit Margin"] == "12.5%"

    def test_raw_rows_follow_input(self, svc, records) -> None:
        result = svc.build("raw", records)
        assert len(result.rows) == len(records)
        assert result.rows[0]["City"] == "Los Angeles"
        assert result.rows[0]["Sales"] == 400.0

    def test_dimension_metric_label(self, svc, records) -> None:
        result = svc.build("regions", records, metric=Metric.PROFIT_MARGIN)
        assert result.fields == ["Region", "Profit Margin"]
        assert result.rows[0]["Region"] == "Central"

    def test_empty_records(self, svc) -> None:
        result = svc.build("categories", [])
        assert result.rows == []
        assert result.fields == []

    def test_unknown_dataset(self, svc, records) -> None:
        with pytest.raises(ValueError):
            svc.build("customers", records)

    def test_unknown_metric(self, svc, records) -> None:
        with pytest.raises(UnknownMetricError):
            svc.build("categories", records, metric="orders")


class TestToCsv:
    def test_header_and_rows(self, svc, records) -> None:
        text = to_csv(svc.build("categories", records))
        lines = text.splitlines()
        assert lines[0] == "Category,Profit"
        assert lines[1] == "Technology,180.0"
        assert len(lines) == 4

    def test_empty_result(self) -> None:
        assert to_csv(ExportResult()) == "\n"
