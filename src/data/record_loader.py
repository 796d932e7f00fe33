"""
Record Loader

Reads flat records for the CLI from CSV or JSON files with pandas.

The grouping core never reads files itself; callers that already hold
records pass them straight to src.grouping.aggregate().
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from src.core.data_context import DataContext, get_data_context
from src.core.error_taxonomy import RecordLoadError

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".csv", ".json"}


def records_from_frame(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Convert a DataFrame to record dicts.

    NaN/NaT cells become None so that missing values group under a single
    None bucket and count as 0 in sums.
    """
    cleaned = df.astype(object).where(pd.notna(df), None)
    return cleaned.to_dict(orient="records")


class RecordLoader:
    """
    Loads records from a file, parsing the configured date column.

    Usage:
        loader = RecordLoader()
        records = loader.load("transactions.csv")
    """

    def __init__(self, data_context: DataContext = None):
        self.data_context = data_context or get_data_context()

    def load(self, path: Union[str, Path]) -> List[Dict[str, Any]]:
        """
        Load records from a .csv or .json file.

        Raises:
            RecordLoadError: if the file is missing, unsupported or unreadable
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise RecordLoadError(
                f"Unsupported record file type '{suffix}'. Use one of {sorted(SUPPORTED_SUFFIXES)}",
                context={"path": str(path)},
            )
        if not path.exists():
            raise RecordLoadError(f"Record file not found: {path}", context={"path": str(path)})

        try:
            if suffix == ".csv":
                df = pd.read_csv(path)
            else:
                df = pd.read_json(path, orient="records", convert_dates=False)
        except (ValueError, pd.errors.ParserError) as e:
            raise RecordLoadError(f"Failed to read {path}: {e}", context={"path": str(path)}) from e

        df = self._parse_dates(df)
        records = records_from_frame(df)
        logger.info(f"Loaded {len(records)} records from {path}")
        return records

    def _parse_dates(self, df: pd.DataFrame) -> pd.DataFrame:
        """Convert the date column to Timestamps; unreadable cells become NaT."""
        date_field = self.data_context.get_date_field()
        if date_field not in df.columns:
            logger.warning(f"Date field '{date_field}' not found in columns {list(df.columns)}")
            return df
        df = df.copy()
        df[date_field] = pd.to_datetime(df[date_field], errors="coerce")
        invalid = int(df[date_field].isna().sum())
        if invalid:
            logger.warning(f"{invalid} rows have a missing or unreadable '{date_field}'")
        return df


def load_records(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Load records with the configured data context."""
    return RecordLoader().load(path)
