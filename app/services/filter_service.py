"""
app/services/filter_service.py

Filter engine for the dashboard's region, segment and drill-down selectors.

Every active criterion is an exact, case-sensitive equality test; active
criteria combine with logical AND.  The ``"all"`` sentinel (or an empty /
missing value) leaves a field unrestricted.  Input order is preserved and
an unmatched value yields an empty list, never an error.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from app.domain.transaction import (
    DrillDown,
    DrillDownField,
    FilterCriteria,
    TransactionRecord,
    is_unrestricted,
)

logger = logging.getLogger(__name__)

_DRILL_DOWN_ACCESSORS: dict[str, Callable[[TransactionRecord], str]] = {
    DrillDownField.REGION: lambda record: record.region,
    DrillDownField.STATE: lambda record: record.state,
    DrillDownField.CITY: lambda record: record.city,
    DrillDownField.POSTAL_CODE: lambda record: str(record.postal_code),
}


def filter_by_region(
    records: Iterable[TransactionRecord], region: str | None
) -> list[TransactionRecord]:
    """Keep records whose region equals *region*; no-op for the sentinel."""
    if is_unrestricted(region):
        return list(records)
    return [record for record in records if record.region == region]


def filter_by_segment(
    records: Iterable[TransactionRecord], segment: str | None
) -> list[TransactionRecord]:
    """Keep records whose segment equals *segment*; no-op for the sentinel."""
    if is_unrestricted(segment):
        return list(records)
    return [record for record in records if record.segment == segment]


def apply_drill_down(
    records: Iterable[TransactionRecord], drill_down: DrillDown | None
) -> list[TransactionRecord]:
    """Apply a geographic drill-down; ``None`` means no drill-down."""
    if drill_down is None:
        return list(records)
    accessor = _DRILL_DOWN_ACCESSORS[drill_down.field]
    return [record for record in records if accessor(record) == drill_down.value]


def filter_records(
    records: Iterable[TransactionRecord], criteria: FilterCriteria
) -> list[TransactionRecord]:
    """
    Apply region, segment and drill-down criteria in sequence.

    Parameters
    ----------
    records:
        Full, already-parsed record collection.
    criteria:
        Active selectors.  Sentinel values are skipped.

    Returns
    -------
    list[TransactionRecord]
        Records matching every active criterion, in input order.
    """
    filtered = filter_by_region(records, criteria.region)
    filtered = filter_by_segment(filtered, criteria.segment)
    filtered = apply_drill_down(filtered, criteria.drill_down)
    logger.debug(
        "filter_records region=%r segment=%r drill_down=%r -> %d rows",
        criteria.region,
        criteria.segment,
        criteria.drill_down,
        len(filtered),
    )
    return filtered


def toggle_drill_down(current: DrillDown | None, field: str, value: str) -> DrillDown | None:
    """
    Return the drill-down that results from selecting (*field*, *value*).

    Selecting the currently active drill-down clears it; any other
    selection replaces it.
    """
    selected = DrillDown(field=field, value=value)
    if current == selected:
        return None
    return selected
