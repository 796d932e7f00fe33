"""
Derived-key resolution.

Maps a grouping key name to the scalar value a record is bucketed by, plus
its display label. "year", "month" and "quarter" are derived from the
record's date field; every other name reads that field directly.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence

from src.core.date_periods import PeriodType, is_missing, month_index, parse_date, quarter_label
from src.core.error_taxonomy import InvalidDateError, InvalidGroupingKeyError
from src.core.locale_format import DateFormatter, format_month, resolve_locale
from src.grouping.models import GroupKey, Record, get_field, has_field

logger = logging.getLogger(__name__)


class KeyKind(Enum):
    YEAR = PeriodType.YEAR.value
    MONTH = PeriodType.MONTH.value
    QUARTER = PeriodType.QUARTER.value
    FIELD = "field"


@dataclass(frozen=True)
class GroupingKey:
    """A parsed grouping key: one of the derived kinds or a plain field."""
    kind: KeyKind
    name: str

    @property
    def is_derived(self) -> bool:
        return self.kind is not KeyKind.FIELD

    @classmethod
    def parse(cls, name: str) -> "GroupingKey":
        if not isinstance(name, str) or not name:
            raise InvalidGroupingKeyError(
                f"Grouping key must be a non-empty string, got {name!r}",
                context={"key": repr(name)},
            )
        for kind in (KeyKind.YEAR, KeyKind.MONTH, KeyKind.QUARTER):
            if name == kind.value:
                return cls(kind=kind, name=name)
        return cls(kind=KeyKind.FIELD, name=name)


def parse_keys(keys: Sequence[str]) -> List[GroupingKey]:
    """Parse an ordered list of key names."""
    if isinstance(keys, str):
        raise InvalidGroupingKeyError(
            f"Grouping keys must be a sequence of names, got the string {keys!r}",
            context={"keys": keys},
        )
    return [GroupingKey.parse(name) for name in keys]


@dataclass(frozen=True)
class ResolvedKey:
    """Grouping value for one record at one level, with its display label."""
    value: GroupKey
    label: Any


class KeyResolver:
    """
    Resolves grouping keys against records.

    Usage:
        resolver = KeyResolver(date_field="date", formatter=resolve_locale("de-DE"))
        resolved = resolver.resolve(GroupingKey.parse("month"), record)
        resolved.value   # 0 for January
        resolved.label   # "Januar"
    """

    def __init__(self, date_field: str, formatter: Optional[DateFormatter] = None):
        self.date_field = date_field
        self.formatter = formatter

    def resolve(self, key: GroupingKey, record: Record, index: Optional[int] = None) -> ResolvedKey:
        """
        Resolve one key for one record.

        Raises:
            InvalidDateError: if a derived key is requested and the date
                field is missing or unreadable
        """
        if key.kind is KeyKind.FIELD:
            value = get_field(record, key.name)
            if is_missing(value):
                if not has_field(record, key.name):
                    logger.debug(f"Record {index} has no value for '{key.name}', grouped under None")
                value = None
            return ResolvedKey(value=value, label=value)

        d = self._record_date(key, record, index)
        if key.kind is KeyKind.YEAR:
            return ResolvedKey(value=d.year, label=d.year)
        if key.kind is KeyKind.MONTH:
            return ResolvedKey(value=month_index(d), label=format_month(self._month_formatter(), d))
        label = quarter_label(d)
        return ResolvedKey(value=label, label=label)

    def _record_date(self, key: GroupingKey, record: Record, index: Optional[int]):
        raw = get_field(record, self.date_field)
        d = parse_date(raw)
        if d is None:
            problem = "missing" if is_missing(raw) else f"not a valid date ({raw!r})"
            raise InvalidDateError(
                f"Cannot group by '{key.name}': field '{self.date_field}' is {problem}"
                + (f" in record {index}" if index is not None else ""),
                context={"key": key.name, "date_field": self.date_field, "record_index": index},
            )
        return d

    def _month_formatter(self) -> DateFormatter:
        if self.formatter is None:
            self.formatter = resolve_locale()
        return self.formatter
