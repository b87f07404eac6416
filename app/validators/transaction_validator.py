"""
app/validators/transaction_validator.py

Row-level validation and type parsing for transaction CSV ingestion.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from app.domain.ingestion import RowValidationError
from app.domain.transaction import TransactionRecord

REQUIRED_COLUMNS: tuple[str, ...] = (
    "Ship Mode",
    "Segment",
    "City",
    "State",
    "Region",
    "Category",
    "Sub-Category",
    "Sales",
    "Quantity",
    "Profit",
)

OPTIONAL_COLUMNS: tuple[str, ...] = (
    "Row ID",
    "Order ID",
    "Order Date",
    "Ship Date",
    "Customer ID",
    "Customer Name",
    "Country",
    "Postal Code",
    "Product ID",
    "Product Name",
    "Discount",
)


class TransactionRowValidator:
    """
    Validates and parses one raw CSV row into a :class:`TransactionRecord`.

    Sales and profit must be numeric and quantity an integer; rows failing
    either check are rejected.  Discount is not validated: blank or
    malformed values become ``0.0``.
    """

    def is_completely_empty_row(self, row: Mapping[str, Any]) -> bool:
        """
        Return True when all values in the row are empty or whitespace.
        """

        return all(self._is_blank(value) for value in row.values())

    def validate_row(
        self,
        *,
        row: Mapping[str, str | None],
        row_number: int,
    ) -> tuple[TransactionRecord | None, list[RowValidationError]]:
        """
        Validate and parse one CSV row keyed by the dataset's column headers.
        """

        errors: list[RowValidationError] = []

        sales = self._parse_required_float(
            value=row.get("Sales"), row_number=row_number, column="Sales", errors=errors
        )
        profit = self._parse_required_float(
            value=row.get("Profit"), row_number=row_number, column="Profit", errors=errors
        )
        quantity = self._parse_quantity(
            value=row.get("Quantity"), row_number=row_number, errors=errors
        )

        if errors:
            return None, errors

        return (
            TransactionRecord(
                row_id=self._parse_row_id(row.get("Row ID")),
                order_id=self._text(row.get("Order ID")),
                product_id=self._text(row.get("Product ID")),
                ship_mode=self._text(row.get("Ship Mode")),
                segment=self._text(row.get("Segment")),
                country=self._text(row.get("Country")),
                city=self._text(row.get("City")),
                state=self._text(row.get("State")),
                postal_code=self._text(row.get("Postal Code")),
                region=self._text(row.get("Region")),
                category=self._text(row.get("Category")),
                sub_category=self._text(row.get("Sub-Category")),
                sales=sales,
                quantity=quantity,
                discount=self._parse_optional_float(row.get("Discount")),
                profit=profit,
                order_date=self._text(row.get("Order Date")),
                ship_date=self._text(row.get("Ship Date")),
                customer_id=self._text(row.get("Customer ID")),
                customer_name=self._text(row.get("Customer Name")),
                product_name=self._text(row.get("Product Name")),
            ),
            [],
        )

    def _parse_required_float(
        self,
        *,
        value: str | None,
        row_number: int,
        column: str,
        errors: list[RowValidationError],
    ) -> float:
        if self._is_blank(value):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=column,
                    message="Required value is missing.",
                    value=self._stringify_value(value),
                )
            )
            return 0.0

        parsed = self._to_float(value)
        if parsed is None:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=column,
                    message="Value must be numeric.",
                    value=self._stringify_value(value),
                )
            )
            return 0.0
        return parsed

    def _parse_quantity(
        self,
        *,
        value: str | None,
        row_number: int,
        errors: list[RowValidationError],
    ) -> int:
        if self._is_blank(value):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="Quantity",
                    message="Required value is missing.",
                    value=self._stringify_value(value),
                )
            )
            return 0

        try:
            return int(str(value).strip())
        except ValueError:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="Quantity",
                    message="Quantity must be an integer.",
                    value=self._stringify_value(value),
                )
            )
            return 0

    def _parse_optional_float(self, value: str | None) -> float:
        if self._is_blank(value):
            return 0.0
        parsed = self._to_float(value)
        return 0.0 if parsed is None else parsed

    def _parse_row_id(self, value: str | None) -> int | str:
        raw = self._text(value)
        try:
            return int(raw)
        except ValueError:
            return raw

    @staticmethod
    def _to_float(value: Any) -> float | None:
        try:
            parsed = float(Decimal(str(value).strip()))
        except (InvalidOperation, ValueError):
            return None
        if parsed != parsed or parsed in (float("inf"), float("-inf")):
            return None
        return parsed

    @staticmethod
    def _text(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, (list, tuple)):
            return all(str(item).strip() == "" for item in value)
        return str(value).strip() == ""

    @staticmethod
    def _stringify_value(value: Any) -> str | None:
        if value is None:
            return None
        return str(value)
