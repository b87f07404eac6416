"""
app/domain/lookups.py

Static colour and label lookup tables.

All tables are read-only mappings initialised once at import time.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

TECH_WEST = "#0b2d79"
OFFICE_SOUTH = "#1470e6"
FURNITURE_EAST = "#9852d9"
CENTRAL = "#e43fdd"
NO_DATA = "#1a1a1a"
DIMMED = "#e9ecef"
DEFAULT_COLOR = "#6c757d"
"""Fallback colour for keys missing from a lookup."""

CATEGORY_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "Technology": TECH_WEST,
        "Office Supplies": OFFICE_SOUTH,
        "Furniture": FURNITURE_EAST,
    }
)

REGION_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "West": TECH_WEST,
        "South": OFFICE_SOUTH,
        "East": FURNITURE_EAST,
        "Central": CENTRAL,
    }
)

SEGMENT_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "Consumer": OFFICE_SOUTH,
        "Corporate": TECH_WEST,
        "Home Office": FURNITURE_EAST,
    }
)

SHIP_MODE_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "Standard Class": OFFICE_SOUTH,
        "Second Class": TECH_WEST,
        "First Class": FURNITURE_EAST,
        "Same Day": CENTRAL,
    }
)

SUBCATEGORY_TO_CATEGORY: Mapping[str, str] = MappingProxyType(
    {
        "Phones": "Technology",
        "Copiers": "Technology",
        "Accessories": "Technology",
        "Machines": "Technology",
        "Paper": "Office Supplies",
        "Binders": "Office Supplies",
        "Art": "Office Supplies",
        "Storage": "Office Supplies",
        "Appliances": "Office Supplies",
        "Labels": "Office Supplies",
        "Fasteners": "Office Supplies",
        "Envelopes": "Office Supplies",
        "Supplies": "Office Supplies",
        "Chairs": "Furniture",
        "Tables": "Furniture",
        "Furnishings": "Furniture",
        "Bookcases": "Furniture",
    }
)

_WEST = (
    "California", "Oregon", "Washington", "Nevada", "Arizona", "Utah",
    "Colorado", "New Mexico", "Wyoming", "Montana", "Idaho", "Alaska", "Hawaii",
)
_SOUTH = (
    "Texas", "Oklahoma", "Louisiana", "Arkansas", "Mississippi", "Alabama",
    "Tennessee", "Kentucky", "Florida", "Georgia", "South Carolina",
    "North Carolina", "Virginia", "West Virginia", "Maryland", "Delaware",
    "District of Columbia",
)
_EAST = (
    "New York", "Pennsylvania", "New Jersey", "Connecticut", "Massachusetts",
    "Rhode Island", "Vermont", "New Hampshire", "Maine",
)
_CENTRAL = (
    "Ohio", "Michigan", "Indiana", "Illinois", "Wisconsin", "Minnesota", "Iowa",
    "Missouri", "Kansas", "Nebraska", "South Dakota", "North Dakota",
)

STATE_TO_REGION: Mapping[str, str] = MappingProxyType(
    {
        **{state: "West" for state in _WEST},
        **{state: "South" for state in _SOUTH},
        **{state: "East" for state in _EAST},
        **{state: "Central" for state in _CENTRAL},
    }
)


def parent_category(subcategory: str) -> str | None:
    """Return the parent category of *subcategory*, or None when unmapped."""
    return SUBCATEGORY_TO_CATEGORY.get(subcategory)
