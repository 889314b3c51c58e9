"""
Cascade Test Configuration and Fixtures

Provides a controllable clock and a small geography lookup used to build
country -> region -> city cascades.
"""

import pytest
from typing import Any, Dict, List

from cascadeselect.core.models import FieldConfig, Option


REGIONS: Dict[str, List[Dict[str, Any]]] = {
    "us": [
        {"value": "ca", "label": "California"},
        {"value": "tx", "label": "Texas"},
    ],
    "ca": [
        {"value": "on", "label": "Ontario"},
    ],
}

CITIES: Dict[str, List[Dict[str, Any]]] = {
    "ca": [
        {"value": "sf", "label": "San Francisco"},
        {"value": "la", "label": "Los Angeles"},
    ],
    "tx": [
        {"value": "aus", "label": "Austin"},
    ],
    "on": [
        {"value": "tor", "label": "Toronto"},
    ],
}


class FakeClock:
    """Manually advanced time source for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def opts(*values: Any) -> List[Option]:
    """Options whose label is the value rendered as text."""
    return [Option(value=v, label=str(v)) for v in values]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def two_level_fields():
    """Static first field, second field looked up from the first."""
    def fetch(parent):
        if parent == "A":
            return [{"value": "X", "label": "X"}, {"value": "Y", "label": "Y"}]
        return []

    return [
        FieldConfig(index=0, options=[{"value": "A", "label": "A"}, {"value": "B", "label": "B"}]),
        FieldConfig(index=1, fetch_options=fetch),
    ]


@pytest.fixture
def geography_fields():
    """Country -> region -> multi-select city."""
    def fetch_regions(country):
        return REGIONS.get(country, [])

    async def fetch_cities(region):
        return CITIES.get(region, [])

    return [
        FieldConfig(
            index=0,
            label="Country",
            options=[{"value": "us", "label": "United States"}, {"value": "ca", "label": "Canada"}],
        ),
        FieldConfig(index=1, label="Region", fetch_options=fetch_regions),
        FieldConfig(index=2, label="City", multiple=True, fetch_options=fetch_cities),
    ]
