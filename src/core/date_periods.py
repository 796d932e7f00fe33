"""
Date Period Module

Calendar-period utilities used by the derived grouping keys.

Key Concepts:
- Year = calendar year of the record date
- Month = zero-based month index (January = 0) so months sort chronologically
- Quarter = one of four fixed labels ("1st Quarter" .. "4th Quarter")
"""
import re
import numbers
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Union
from enum import Enum

import pandas as pd

logger = logging.getLogger(__name__)

class PeriodType(Enum):
    """Date-derived grouping keys."""
    YEAR = "year"
    MONTH = "month"
    QUARTER = "quarter"

QUARTER_LABELS = ("1st Quarter", "2nd Quarter", "3rd Quarter", "4th Quarter")

# Accepted string layouts, tried in order
DATE_FORMATS = [
    "%Y-%m-%d",           # 2024-01-15
    "%m/%d/%Y",           # 01/15/2024
    "%Y/%m/%d",           # 2024/01/15
    "%Y-%m-%dT%H:%M:%S",  # 2024-01-15T00:00:00
    "%Y-%m-%d %H:%M:%S",  # 2024-01-15 12:00:00
]

def is_missing(value: Any) -> bool:
    """True for None and scalar null markers (NaN, NaT, pd.NA)."""
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Containers are never null markers
        return False

def parse_date(value: Any) -> Optional[date]:
    """
    Parse a value as a date.

    Accepts date, datetime, pandas.Timestamp and the string layouts in
    DATE_FORMATS. Returns None when the value is missing or unreadable.
    """
    if is_missing(value):
        return None
    if isinstance(value, datetime):
        # pd.Timestamp is a datetime subclass
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value = value.strip()
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(value.split('.')[0], fmt).date()
            except ValueError:
                continue
        # Try just the date portion if there's a time component
        if 'T' in value or ' ' in value:
            date_part = value.split('T')[0].split(' ')[0]
            for fmt in ["%Y-%m-%d", "%m/%d/%Y"]:
                try:
                    return datetime.strptime(date_part, fmt).date()
                except ValueError:
                    continue
    return None

def quarter_label(d: date) -> str:
    """
    Return the quarter of the year for a date.

    Jan-Mar → "1st Quarter", Apr-Jun → "2nd Quarter",
    Jul-Sep → "3rd Quarter", Oct-Dec → "4th Quarter".
    """
    return QUARTER_LABELS[(d.month - 1) // 3]

def month_index(d: date) -> int:
    """Zero-based month index (January = 0)."""
    return d.month - 1

def parse_amount(value: Any) -> Union[int, float, Decimal]:
    """
    Parse a value as a summable amount.

    Numbers are returned unchanged, with numpy scalars converted to the
    matching Python int or float; strings such as "$1,200.50" or "(300)"
    are parsed. Missing or unreadable values count as 0.
    """
    if is_missing(value) or isinstance(value, bool):
        return 0
    if isinstance(value, numbers.Number) and not isinstance(value, Decimal):
        item = getattr(value, "item", None)
        if callable(item):
            value = item()
    if isinstance(value, (int, float, Decimal)):
        return value
    if isinstance(value, str):
        # Remove currency symbols, commas, parentheses for negative
        cleaned = re.sub(r"[$,\s]", "", value)
        if cleaned.startswith("(") and cleaned.endswith(")"):
            cleaned = "-" + cleaned[1:-1]
        try:
            return float(cleaned)
        except ValueError:
            logger.debug(f"Unreadable amount {value!r} counted as 0")
            return 0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0
