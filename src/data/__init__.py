"""
Data layer module for loading flat records from files.
"""
from src.data.record_loader import (
    RecordLoader,
    load_records,
    records_from_frame,
)

__all__ = [
    "RecordLoader",
    "load_records",
    "records_from_frame",
]
