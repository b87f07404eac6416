"""
app/services/ranking_service.py

Top-N / bottom-N city ranking.

Cities are aggregated by :class:`AggregationService`, ordered by the
resolved metric (descending for ``"top"``, ascending for ``"bottom"``) and
truncated.  Ties keep the aggregation's first-encountered order.
"""

from __future__ import annotations

import logging
from typing import Iterable

from app.domain.aggregates import CityEntry
from app.domain.transaction import TransactionRecord
from app.services.aggregation_service import AggregationService

logger = logging.getLogger(__name__)

DEFAULT_RANK_LIMIT: int = 5


class RankMode:
    TOP = "top"
    BOTTOM = "bottom"


ALLOWED_RANK_MODES: frozenset[str] = frozenset({RankMode.TOP, RankMode.BOTTOM})


class RankingService:
    """
    Stateless city ranking selector.

    Parameters
    ----------
    aggregation:
        Aggregation engine used to build per-city values.  A fresh
        :class:`AggregationService` is used when omitted.
    """

    def __init__(self, aggregation: AggregationService | None = None) -> None:
        self._aggregation = aggregation or AggregationService()

    def rank_cities(
        self,
        records: Iterable[TransactionRecord],
        metric: str,
        mode: str = RankMode.TOP,
        limit: int = DEFAULT_RANK_LIMIT,
    ) -> list[CityEntry]:
        """
        Return the *limit* best (``"top"``) or worst (``"bottom"``) cities.

        A *limit* larger than the number of distinct cities returns all of
        them.

        Raises
        ------
        ValueError
            If *mode* is unknown or *limit* is not a positive integer.
        kpi.base.UnknownMetricError
            If *metric* is not a known selector.
        """
        if mode not in ALLOWED_RANK_MODES:
            raise ValueError(
                f"Unknown rank mode {mode!r}. Valid modes: {sorted(ALLOWED_RANK_MODES)}"
            )
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"limit must be a positive integer; got {limit!r}")

        cities = self._aggregation.aggregate_by_city(records, metric)
        if mode == RankMode.BOTTOM:
            # Stable sort: tied cities keep first-seen order.
            cities.sort(key=lambda entry: entry.value)
        ranked = cities[:limit]
        logger.debug(
            "rank_cities metric=%r mode=%r limit=%d -> %d of %d cities",
            metric, mode, limit, len(ranked), len(cities),
        )
        return ranked
