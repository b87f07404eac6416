"""
app/services/scorecard_service.py

Portfolio-level scorecard totals and comparisons.

Formulas
--------
Profit Margin        = 100 * total_profit / total_sales       (0 when sales <= 0)
Sales Comparison     = 100 * filtered_sales / baseline_sales  (0 when baseline <= 0)
Quantity Comparison  = 100 * filtered_qty / baseline_qty      (0 when baseline <= 0)
Profit Comparison    = 100 * filtered_profit / baseline_profit (0 when baseline == 0)
Margin Comparison    = filtered_margin - baseline_margin      (percentage points)

Profit comparison is only guarded against a zero baseline.  When the
baseline profit is negative the share comes out sign-inverted; this is
kept as-is because the intended product behaviour is ambiguous.
"""

from __future__ import annotations

import logging
from typing import Iterable

from app.domain.aggregates import MetricSums, ScorecardResult
from app.domain.transaction import TransactionRecord, is_unrestricted
from kpi.metrics import profit_margin, share_of_total, signed_share

logger = logging.getLogger(__name__)


def _totals(records: Iterable[TransactionRecord]) -> MetricSums:
    totals = MetricSums()
    for record in records:
        totals.add(record.sales, record.profit, record.quantity)
    return totals


class ScorecardService:
    """
    Stateless scorecard calculator.

    Usage::

        result = ScorecardService().calculate(filtered, "West", all_records)
        result.sales_comparison  # share of all sales made in the West
    """

    def calculate(
        self,
        filtered: Iterable[TransactionRecord],
        selected_region: str | None,
        baseline: Iterable[TransactionRecord],
    ) -> ScorecardResult:
        """
        Compute totals for *filtered* and, for a specific region, comparisons
        against *baseline*.

        Parameters
        ----------
        filtered:
            Records of the current view.
        selected_region:
            Active region selector.  The ``"all"`` sentinel omits every
            comparison field (they stay ``None``).
        baseline:
            Unfiltered dataset used as the comparison denominator.

        Returns
        -------
        ScorecardResult
        """
        current = _totals(filtered)
        margin = profit_margin(current.sales, current.profit)

        if is_unrestricted(selected_region):
            logger.debug("Scorecard without comparison over %d rows", current.count)
            return ScorecardResult(
                total_sales=current.sales,
                total_quantity=current.quantity,
                total_profit=current.profit,
                profit_margin=margin,
            )

        reference = _totals(baseline)
        reference_margin = profit_margin(reference.sales, reference.profit)
        if reference.profit < 0:
            logger.debug(
                "Baseline profit is negative (%.4f); profit comparison is sign-inverted",
                reference.profit,
            )

        return ScorecardResult(
            total_sales=current.sales,
            total_quantity=current.quantity,
            total_profit=current.profit,
            profit_margin=margin,
            sales_comparison=share_of_total(current.sales, reference.sales),
            quantity_comparison=share_of_total(current.quantity, reference.quantity),
            profit_comparison=signed_share(current.profit, reference.profit),
            margin_comparison=margin - reference_margin,
        )


def calculate_scorecard(
    filtered: Iterable[TransactionRecord],
    selected_region: str | None,
    baseline: Iterable[TransactionRecord],
) -> ScorecardResult:
    """Module-level shortcut for :meth:`ScorecardService.calculate`."""
    return ScorecardService().calculate(filtered, selected_region, baseline)
