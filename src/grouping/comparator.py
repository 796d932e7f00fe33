"""
Sibling ordering for the grouped tree.

Groups are ordered by `key`; plain records by their own `key` field when they
have one, otherwise by their label field (default `name`).

Comparison rules:
- numbers compare by numeric difference
- strings compare with a locale-aware collation (accents and case are
  secondary differences, so "apple" < "Banana" < "cherry")
- any other pairing (mixed types, None, booleans) compares as equal
"""
import logging
import unicodedata
from numbers import Real
from typing import Any, Callable, List, Tuple

from src.grouping.models import GroupNode, Leaf, get_field, has_field

logger = logging.getLogger(__name__)


def collation_key(value: str) -> Tuple[str, str, str]:
    """
    Sort key approximating a root-locale string collation.

    Primary level ignores accents and case, secondary level orders accents,
    tertiary level puts lowercase before uppercase.
    """
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), decomposed.casefold(), value.swapcase()


def compare_strings(a: str, b: str) -> int:
    ka, kb = collation_key(a), collation_key(b)
    return (ka > kb) - (ka < kb)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def compare_values(a: Any, b: Any) -> int:
    """
    Type-aware comparison of two sort values.

    Returns a negative number, zero or a positive number. Pairs that are not
    both numbers or both strings compare as equal.
    """
    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)
    if isinstance(a, str) and isinstance(b, str):
        return compare_strings(a, b)
    if a is not None or b is not None:
        logger.debug(f"Incomparable sort values {a!r} and {b!r} treated as equal")
    return 0


def make_sort_value(label_field: str = "name") -> Callable[[Any], Any]:
    """Build the function that extracts a node's sort value."""

    def sort_value(item: Any) -> Any:
        if isinstance(item, GroupNode):
            return item.key
        record = item.record if isinstance(item, Leaf) else item
        if has_field(record, "key"):
            return get_field(record, "key")
        if has_field(record, label_field):
            return get_field(record, label_field)
        return ""

    return sort_value


def make_comparator(label_field: str = "name") -> Callable[[Any, Any], int]:
    """Comparator over GroupNodes and Leaf records."""
    sort_value = make_sort_value(label_field)

    def comparator(a: Any, b: Any) -> int:
        return compare_values(sort_value(a), sort_value(b))

    return comparator


def insert_sorted(items: List[Any], new_item: Any, comparator: Callable[[Any, Any], int]) -> int:
    """
    Insert an item into a sorted list, keeping the comparator's order.

    The item goes before the first existing element that does not compare
    strictly less than it. Returns the insertion index.
    """
    i = 0
    while i < len(items) and comparator(items[i], new_item) < 0:
        i += 1
    items.insert(i, new_item)
    return i
