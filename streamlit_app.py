"""Streamlit frontend for the retail performance dashboard."""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path

import pandas as pd
import streamlit as st

from app.config import get_dashboard_settings
from app.domain.transaction import ALL, DrillDownField, FilterCriteria, TransactionRecord
from app.formatting import format_metric_value, format_percent_change
from app.services.csv_ingestion_service import CSVHeaderValidationError, get_csv_ingestion_service
from app.services.dashboard_orchestrator import DashboardOrchestrator
from app.services.export_service import DashboardExportService, to_csv
from app.services.filter_service import filter_records, toggle_drill_down
from app.services.geo_service import region_color, value_colors
from kpi.base import METRIC_LABELS, Metric

logging.basicConfig(level=logging.INFO)

st.set_page_config(page_title="Retail Performance", page_icon="RP", layout="wide")

_EXPORT_DATASETS = [
    "summary",
    "raw",
    "states",
    "subcategories",
    "categories",
    "segments",
    "regions",
    "ship_modes",
]


@st.cache_data(show_spinner=False)
def _load_records(path: str) -> tuple[list[TransactionRecord], int]:
    """Load well-formed records and the count of dropped rows."""
    result = get_csv_ingestion_service().load_path(Path(path))
    return result.records, result.summary.rows_failed


def _options(records: list[TransactionRecord], attribute: str) -> list[str]:
    return [ALL, *sorted({getattr(record, attribute) for record in records})]


def _frame(entries: list) -> pd.DataFrame:
    return pd.DataFrame([asdict(entry) for entry in entries])


if "drill_down" not in st.session_state:
    st.session_state.drill_down = None


settings = get_dashboard_settings()

st.title("Retail Performance")

try:
    records, rows_failed = _load_records(str(settings.data_path))
except (OSError, CSVHeaderValidationError) as exc:
    st.error(f"Could not load transactions from {settings.data_path}: {exc}")
    st.stop()

if rows_failed:
    st.caption(f"{rows_failed} malformed row(s) were skipped.")


with st.sidebar:
    st.header("Filters")
    region = st.selectbox("Region", options=_options(records, "region"), index=0)
    segment = st.selectbox("Segment", options=_options(records, "segment"), index=0)
    metric_options = [Metric.PROFIT, Metric.SALES, Metric.QUANTITY, Metric.PROFIT_MARGIN]
    metric = st.selectbox(
        "Metric",
        options=metric_options,
        index=metric_options.index(settings.default_metric),
        format_func=lambda value: METRIC_LABELS[value],
    )

    st.header("Drill down")
    state_options = sorted({record.state for record in records})
    drill_state = st.selectbox("State", options=state_options)
    if st.button("Toggle state drill-down", use_container_width=True):
        st.session_state.drill_down = toggle_drill_down(
            st.session_state.drill_down, DrillDownField.STATE, drill_state
        )
    if st.session_state.drill_down is not None:
        st.caption(
            f"Drilled into {st.session_state.drill_down.field} = "
            f"{st.session_state.drill_down.value}"
        )
        if st.button("Clear drill-down", use_container_width=True):
            st.session_state.drill_down = None
            st.rerun()


criteria = FilterCriteria(region=region, segment=segment, drill_down=st.session_state.drill_down)
snapshot = DashboardOrchestrator(settings).run(records, criteria, metric)


st.subheader("Scorecard")
scorecard = snapshot.scorecard
columns = st.columns(4)
columns[0].metric(
    "Total Sales",
    format_metric_value(scorecard.total_sales, Metric.SALES),
    format_percent_change(scorecard.sales_comparison) or None,
)
columns[1].metric(
    "Total Quantity",
    format_metric_value(scorecard.total_quantity, Metric.QUANTITY),
    format_percent_change(scorecard.quantity_comparison) or None,
)
columns[2].metric(
    "Total Profit",
    format_metric_value(scorecard.total_profit, Metric.PROFIT),
    format_percent_change(scorecard.profit_comparison) or None,
)
columns[3].metric(
    "Profit Margin",
    format_metric_value(scorecard.profit_margin, Metric.PROFIT_MARGIN),
    format_percent_change(scorecard.margin_comparison) or None,
)

if snapshot.row_count == 0:
    st.info("No transactions match the current filters.")
    st.stop()


st.subheader(f"Performance by {METRIC_LABELS[metric]}")
performance = snapshot.performance
for column, (title, entries) in zip(
    st.columns(4),
    [
        ("Category", performance.category),
        ("Segment", performance.segment),
        ("Region", performance.region),
        ("Ship Mode", performance.ship_mode),
    ],
):
    column.caption(title)
    column.bar_chart(_frame(entries), x="name", y="value", color="color")


st.subheader("Cities")
top_column, bottom_column = st.columns(2)
top_column.caption("Top cities")
top_column.dataframe(_frame(snapshot.top_cities), use_container_width=True, hide_index=True)
bottom_column.caption("Bottom cities")
bottom_column.dataframe(_frame(snapshot.bottom_cities), use_container_width=True, hide_index=True)


st.subheader("States")
states_df = _frame(snapshot.states)
colors = value_colors(snapshot.states, metric)
states_df["value color"] = states_df["state"].map(lambda state: colors[state].color)
states_df["region color"] = states_df["state"].map(
    lambda state: region_color(state, region).color
)
st.dataframe(states_df, use_container_width=True, hide_index=True)


st.subheader("Subcategories")
subcategories_df = _frame(snapshot.subcategories)
st.bar_chart(subcategories_df, x="subcategory", y="profit", color="color")


st.subheader("Discount analysis")
buckets_df = _frame(snapshot.discount_buckets)
left, right = st.columns(2)
left.caption("Sales and profit by discount level")
left.bar_chart(buckets_df, x="discount", y=["sales", "profit"])
right.caption("Share of each measure by discount level")
right.bar_chart(
    _frame(snapshot.stacked_shares),
    x="discount",
    y=["sales", "profit", "quantity", "profit_margin"],
)
st.caption("Discount distribution by subcategory")
st.scatter_chart(
    _frame(snapshot.discount_distribution),
    x="central_discount",
    y="metric_value",
    size="bubble_size",
    color="color",
)


st.subheader("Export")
dataset = st.selectbox("Dataset", options=_EXPORT_DATASETS)
export = DashboardExportService().build(
    dataset,
    filter_records(records, criteria),
    metric=metric,
    selected_region=region,
    selected_segment=segment,
)
st.download_button(
    "Download CSV",
    data=to_csv(export),
    file_name=f"{dataset}.csv",
    mime="text/csv",
)
