"""
tests/conftest.py

Shared fixtures: a record factory and a small multi-region dataset.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from app.domain.transaction import TransactionRecord

_DEFAULTS: dict[str, Any] = {
    "row_id": 1,
    "order_id": "CA-2016-000001",
    "product_id": "OFF-PA-10000001",
    "ship_mode": "Standard Class",
    "segment": "Consumer",
    "country": "United States",
    "city": "Los Angeles",
    "state": "California",
    "postal_code": "90036",
    "region": "West",
    "category": "Office Supplies",
    "sub_category": "Paper",
    "sales": 0.0,
    "quantity": 0,
    "discount": 0.0,
    "profit": 0.0,
}


def build_record(**overrides: Any) -> TransactionRecord:
    """TransactionRecord with neutral defaults; pass only the fields under test."""
    return TransactionRecord(**{**_DEFAULTS, **overrides})


@pytest.fixture()
def make_record() -> Callable[..., TransactionRecord]:
    return build_record


@pytest.fixture()
def records() -> list[TransactionRecord]:
    """
    Eight rows over four regions, three segments and six cities.

    Totals: sales 2000, profit 250, quantity 28.
    """
    return [
        build_record(
            row_id=1, region="West", state="California", city="Los Angeles",
            postal_code="90036", segment="Consumer", category="Technology",
            sub_category="Phones", ship_mode="Second Class",
            sales=400.0, profit=80.0, quantity=4, discount=0.0,
        ),
        build_record(
            row_id=2, region="West", state="California", city="San Francisco",
            postal_code="94109", segment="Corporate", category="Furniture",
            sub_category="Tables", ship_mode="Standard Class",
            sales=300.0, profit=-60.0, quantity=2, discount=0.2,
        ),
        build_record(
            row_id=3, region="West", state="Washington", city="Seattle",
            postal_code="98103", segment="Consumer", category="Office Supplies",
            sub_category="Binders", ship_mode="Standard Class",
            sales=200.0, profit=50.0, quantity=5, discount=0.2,
        ),
        build_record(
            row_id=4, region="East", state="New York", city="New York City",
            postal_code="10024", segment="Consumer", category="Technology",
            sub_category="Phones", ship_mode="First Class",
            sales=500.0, profit=100.0, quantity=3, discount=0.0,
        ),
        build_record(
            row_id=5, region="East", state="Pennsylvania", city="Philadelphia",
            postal_code="19140", segment="Home Office", category="Furniture",
            sub_category="Chairs", ship_mode="Standard Class",
            sales=100.0, profit=-20.0, quantity=2, discount=0.3,
        ),
        build_record(
            row_id=6, region="South", state="Florida", city="Fort Lauderdale",
            postal_code="33311", segment="Corporate", category="Office Supplies",
            sub_category="Storage", ship_mode="Same Day",
            sales=250.0, profit=40.0, quantity=6, discount=0.0,
        ),
        build_record(
            row_id=7, region="Central", state="Texas", city="Houston",
            postal_code="77095", segment="Consumer", category="Office Supplies",
            sub_category="Paper", ship_mode="Standard Class",
            sales=150.0, profit=30.0, quantity=4, discount=0.2,
        ),
        build_record(
            row_id=8, region="West", state="California", city="Los Angeles",
            postal_code="90032", segment="Home Office", category="Office Supplies",
            sub_category="Paper", ship_mode="Second Class",
            sales=100.0, profit=30.0, quantity=2, discount=0.0,
        ),
    ]
