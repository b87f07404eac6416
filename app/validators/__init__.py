"""
app/validators package marker.
"""

from app.validators.transaction_validator import (
    OPTIONAL_COLUMNS,
    REQUIRED_COLUMNS,
    TransactionRowValidator,
)

__all__ = [
    "OPTIONAL_COLUMNS",
    "REQUIRED_COLUMNS",
    "TransactionRowValidator",
]
