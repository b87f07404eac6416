"""
app/domain/transaction.py

Transaction record and filter criteria value objects.
"""

from __future__ import annotations

from dataclasses import dataclass

ALL = "all"
"""Filter sentinel meaning "no restriction on this field"."""


def is_unrestricted(value: str | None) -> bool:
    """
    Return True when a filter value imposes no restriction.

    The ``"all"`` sentinel, an empty string and ``None`` are all treated as
    "no filter"; none of them is ever matched literally.
    """
    return value is None or value == "" or value == ALL


@dataclass(frozen=True)
class TransactionRecord:
    """
    One order line of the retail dataset.

    Identifiers and date/customer/product descriptors are carried verbatim
    and never used by aggregation.  Categorical attributes are compared by
    case-sensitive exact match.
    """

    row_id: int | str
    order_id: str
    product_id: str
    ship_mode: str
    segment: str
    country: str
    city: str
    state: str
    postal_code: str
    region: str
    category: str
    sub_category: str
    sales: float
    quantity: int
    discount: float
    profit: float
    order_date: str = ""
    ship_date: str = ""
    customer_id: str = ""
    customer_name: str = ""
    product_name: str = ""


class DrillDownField:
    REGION = "region"
    STATE = "state"
    CITY = "city"
    POSTAL_CODE = "postal_code"


ALLOWED_DRILL_DOWN_FIELDS: frozenset[str] = frozenset(
    {
        DrillDownField.REGION,
        DrillDownField.STATE,
        DrillDownField.CITY,
        DrillDownField.POSTAL_CODE,
    }
)


@dataclass(frozen=True)
class DrillDown:
    """
    Single-field equality filter applied by a geographic selection.
    """

    field: str
    """One of :data:`ALLOWED_DRILL_DOWN_FIELDS`."""

    value: str
    """Exact value to match; postal codes are compared as strings."""

    def __post_init__(self) -> None:
        if self.field not in ALLOWED_DRILL_DOWN_FIELDS:
            raise ValueError(
                f"Unknown drill-down field {self.field!r}. "
                f"Valid fields: {sorted(ALLOWED_DRILL_DOWN_FIELDS)}"
            )


@dataclass(frozen=True)
class FilterCriteria:
    """
    Conjunction of the dashboard's filter selectors.
    """

    region: str | None = ALL
    segment: str | None = ALL
    drill_down: DrillDown | None = None

    @property
    def is_unfiltered(self) -> bool:
        return (
            is_unrestricted(self.region)
            and is_unrestricted(self.segment)
            and self.drill_down is None
        )
