"""
app/services/export_service.py

Tabular export of the dashboard's views.

Supports eight datasets, each fully flattened for spreadsheet consumption:

    summary        - scorecard totals, formatted, with the active filters
    raw            - filtered transaction rows
    states         - per-state sums (map data)
    subcategories  - per-subcategory sums and margin, descending by profit
    categories     - per-category value for the chosen metric
    segments       - per-segment value for the chosen metric
    regions        - per-region value for the chosen metric
    ship_modes     - per-ship-mode value for the chosen metric

Every dataset is computed from the records passed in; filter first, then
export.  Rendering is limited to CSV text.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

from app.domain.transaction import TransactionRecord, is_unrestricted
from app.formatting import format_metric_value
from app.services.aggregation_service import AggregationService
from app.services.scorecard_service import ScorecardService
from kpi.base import METRIC_LABELS, Metric, validate_metric

_VALID_DATASETS: frozenset[str] = frozenset(
    {
        "summary",
        "raw",
        "states",
        "subcategories",
        "categories",
        "segments",
        "regions",
        "ship_modes",
    }
)

_RAW_FIELDS: tuple[tuple[str, str], ...] = (
    ("Order ID", "order_id"),
    ("Ship Mode", "ship_mode"),
    ("Segment", "segment"),
    ("Country", "country"),
    ("City", "city"),
    ("State", "state"),
    ("Region", "region"),
    ("Category", "category"),
    ("Sub-Category", "sub_category"),
    ("Sales", "sales"),
    ("Quantity", "quantity"),
    ("Discount", "discount"),
    ("Profit", "profit"),
)


# ---------------------------------------------------------------------------
# Export result container
# ---------------------------------------------------------------------------


@dataclass
class ExportResult:
    """
    Flat tabular data ready for CSV serialisation.

    Attributes
    ----------
    rows:   Flat dict per row; all values are scalars or strings.
    fields: Ordered column names; deterministic across calls for the same dataset.
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)


def _collect_fields(rows: list[dict[str, Any]]) -> list[str]:
    """
    Union all keys across rows while preserving first-seen insertion order.
    Guarantees a deterministic, stable column list for CSV headers.
    """
    seen: dict[str, None] = {}
    for row in rows:
        for k in row:
            seen.setdefault(k, None)
    return list(seen)


def _filter_label(value: str | None, plural: str) -> str:
    return f"All {plural}" if is_unrestricted(value) else str(value)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class DashboardExportService:
    """
    Builds flat export tables from already-filtered transaction records.
    """

    def __init__(
        self,
        aggregation: AggregationService | None = None,
        scorecard: ScorecardService | None = None,
    ) -> None:
        self._aggregation = aggregation or AggregationService()
        self._scorecard = scorecard or ScorecardService()
        self._builders: dict[str, Callable[..., list[dict[str, Any]]]] = {
            "summary": self._summary_rows,
            "raw": self._raw_rows,
            "states": self._state_rows,
            "subcategories": self._subcategory_rows,
            "categories": self._dimension_rows(self._aggregation.aggregate_by_category, "Category"),
            "segments": self._dimension_rows(self._aggregation.aggregate_by_segment, "Segment"),
            "regions": self._dimension_rows(self._aggregation.aggregate_by_region, "Region"),
            "ship_modes": self._dimension_rows(self._aggregation.aggregate_by_ship_mode, "Ship Mode"),
        }

    def build(
        self,
        dataset: str,
        records: Sequence[TransactionRecord],
        *,
        metric: str = Metric.PROFIT,
        selected_region: str | None = None,
        selected_segment: str | None = None,
    ) -> ExportResult:
        """
        Build one export table.

        Raises
        ------
        ValueError
            If *dataset* is not a supported dataset name.
        kpi.base.UnknownMetricError
            If *metric* is not a known selector.
        """
        if dataset not in _VALID_DATASETS:
            raise ValueError(
                f"Unknown export dataset {dataset!r}. Valid datasets: {sorted(_VALID_DATASETS)}"
            )
        validate_metric(metric)
        rows = self._builders[dataset](
            records,
            metric=metric,
            selected_region=selected_region,
            selected_segment=selected_segment,
        )
        return ExportResult(rows=rows, fields=_collect_fields(rows))

    # ------------------------------------------------------------------
    # Dataset builders
    # ------------------------------------------------------------------

    def _summary_rows(
        self,
        records: Sequence[TransactionRecord],
        *,
        selected_region: str | None,
        selected_segment: str | None,
        **_: Any,
    ) -> list[dict[str, Any]]:
        # Exported records are already the current view, so no comparison.
        scorecard = self._scorecard.calculate(records, None, records)
        generated = datetime.now(tz=timezone.utc).isoformat()
        return [
            {"Metric": "Generated", "Value": generated},
            {"Metric": "Region Filter", "Value": _filter_label(selected_region, "Regions")},
            {"Metric": "Segment Filter", "Value": _filter_label(selected_segment, "Segments")},
            {"Metric": "Total Sales", "Value": format_metric_value(scorecard.total_sales, Metric.SALES)},
            {"Metric": "Total Profit", "Value": format_metric_value(scorecard.total_profit, Metric.PROFIT)},
            {
                "Metric": "Total Quantity",
                "Value": format_metric_value(scorecard.total_quantity, Metric.QUANTITY),
            },
            {
                "Metric": "Profit Margin",
                "Value": format_metric_value(scorecard.profit_margin, Metric.PROFIT_MARGIN),
            },
        ]

    @staticmethod
    def _raw_rows(records: Sequence[TransactionRecord], **_: Any) -> list[dict[str, Any]]:
        return [
            {header: getattr(record, attribute) for header, attribute in _RAW_FIELDS}
            for record in records
        ]

    def _state_rows(self, records: Sequence[TransactionRecord], **_: Any) -> list[dict[str, Any]]:
        return [
            {
                "State": entry.state,
                "Region": entry.region,
                "Profit": entry.profit,
                "Sales": entry.sales,
                "Quantity": entry.quantity,
            }
            for entry in self._aggregation.aggregate_by_state(records)
        ]

    def _subcategory_rows(
        self, records: Sequence[TransactionRecord], **_: Any
    ) -> list[dict[str, Any]]:
        return [
            {
                "Sub-Category": entry.subcategory,
                "Category": entry.category,
                "Profit": entry.profit,
                "Sales": entry.sales,
                "Quantity": entry.quantity,
                "Profit Margin (%)": entry.profit_margin,
            }
            for entry in self._aggregation.aggregate_by_subcategory(records)
        ]

    @staticmethod
    def _dimension_rows(
        aggregate: Callable[[Sequence[TransactionRecord], str], list],
        label: str,
    ) -> Callable[..., list[dict[str, Any]]]:
        def build(
            records: Sequence[TransactionRecord], *, metric: str, **_: Any
        ) -> list[dict[str, Any]]:
            return [
                {label: entry.name, METRIC_LABELS[metric]: entry.value}
                for entry in aggregate(records, metric)
            ]

        return build


def to_csv(result: ExportResult) -> str:
    """Render *result* as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=result.fields, lineterminator="\n")
    writer.writeheader()
    writer.writerows(result.rows)
    return buffer.getvalue()
