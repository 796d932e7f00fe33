"""
Shared fixtures: isolate every test from the caller's environment and from
the cached data context singleton.
"""
from datetime import date

import pytest

from src.core.data_context import reset_data_context

GROUPING_ENV_VARS = [
    "GROUPING_DATE_FIELD",
    "GROUPING_AMOUNT_FIELD",
    "GROUPING_LOCALE",
    "GROUPING_CONFIG_DIR",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in GROUPING_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_data_context()
    yield
    reset_data_context()


@pytest.fixture
def quarter_records():
    """Three records spanning the first two quarters of 2023."""
    return [
        {"date": date(2023, 1, 15), "cat": "A", "price": 10},
        {"date": date(2023, 2, 20), "cat": "B", "price": 5},
        {"date": date(2023, 4, 10), "cat": "A", "price": 3},
    ]


@pytest.fixture
def two_year_records():
    """Records spanning two years, deliberately out of order."""
    return [
        {"date": date(2024, 3, 1), "category": "Travel", "name": "Train", "price": 40},
        {"date": date(2023, 11, 5), "category": "Software", "name": "IDE", "price": 200},
        {"date": date(2023, 1, 9), "category": "Travel", "name": "Taxi", "price": 25},
        {"date": date(2024, 1, 20), "category": "Software", "name": "CI", "price": 60},
        {"date": date(2023, 11, 28), "category": "Travel", "name": "Hotel", "price": 310},
        {"date": date(2024, 3, 15), "category": "Office", "name": "Chair", "price": 150},
    ]
