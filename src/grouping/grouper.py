"""
Grouping Engine

Builds the GroupNode tree from flat records and an ordered key list, then
computes the sums bottom-up.

Example: keys=["year", "quarter"] creates a nested structure:
    2023 (sum 18)
        1st Quarter (sum 15)
            {record}, {record}
        2nd Quarter (sum 3)
            {record}
    2024 (sum ...)
"""
import logging
from typing import Iterable, List, Optional, Sequence, Union

from src.core.data_context import DataContext, get_data_context
from src.core.date_periods import parse_amount
from src.core.locale_format import LocaleArg, resolve_locale
from src.grouping.comparator import insert_sorted, make_comparator
from src.grouping.derived_keys import GroupingKey, KeyKind, KeyResolver, parse_keys
from src.grouping.models import GroupNode, Leaf, Record, TreeNode, get_field

logger = logging.getLogger(__name__)


class GroupBuilder:
    """
    Groups records into a sorted tree with subtotal sums.

    Every call to build() creates a new tree; the builder keeps no state
    between calls.

    Usage:
        builder = GroupBuilder()
        tree = builder.build(records, ["year", "month"], locale="de-DE")
    """

    def __init__(
        self,
        date_field: str = None,
        amount_field: str = None,
        label_field: str = None,
        data_context: DataContext = None,
    ):
        self.data_context = data_context or get_data_context()
        self.date_field = date_field or self.data_context.get_date_field()
        self.amount_field = amount_field or self.data_context.get_amount_field()
        self.label_field = label_field or self.data_context.get_label_field()
        self.comparator = make_comparator(self.label_field)

    def build(
        self,
        records: Iterable[Record],
        keys: Sequence[str],
        locale: LocaleArg = None,
    ) -> List[TreeNode]:
        """
        Group records by the given keys.

        Args:
            records: Flat records (mappings or attribute-bearing objects)
            keys: Ordered key names; "year", "month" and "quarter" are derived
                from the date field
            locale: Locale tag, formatter callable or object for month names

        Returns:
            Top-level GroupNodes, fully summed. With no keys, the records
            themselves as a flat sorted list of Leaf nodes.

        Raises:
            InvalidDateError: a derived key met a missing or invalid date
            InvalidGroupingKeyError: a key name is not a non-empty string
            UnknownLocaleError: a "month" key was requested and the locale
                tag has no month names configured
        """
        grouping_keys = parse_keys(keys)
        formatter = None
        if any(key.kind is KeyKind.MONTH for key in grouping_keys):
            formatter = resolve_locale(locale, self.data_context)
        resolver = KeyResolver(date_field=self.date_field, formatter=formatter)

        roots: List[TreeNode] = []
        count = 0
        for index, record in enumerate(records):
            self._place(roots, record, index, grouping_keys, resolver)
            count += 1

        self.compute_sums(roots)

        logger.debug(
            f"Grouped {count} records by {[k.name for k in grouping_keys]} "
            f"into {len(roots)} top-level nodes"
        )
        return roots

    def _place(
        self,
        roots: List[TreeNode],
        record: Record,
        index: int,
        grouping_keys: List[GroupingKey],
        resolver: KeyResolver,
    ):
        """Walk one record down the tree, creating groups as needed."""
        current = roots
        for key in grouping_keys:
            resolved = resolver.resolve(key, record, index)
            group = self._find_group(current, resolved.value)
            if group is None:
                group = GroupNode(key=resolved.value, name=resolved.label)
                insert_sorted(current, group, self.comparator)
            current = group.children
        insert_sorted(current, Leaf(record), self.comparator)

    @staticmethod
    def _find_group(siblings: List[TreeNode], value) -> Optional[GroupNode]:
        for node in siblings:
            if isinstance(node, GroupNode) and _same_key(node.key, value):
                return node
        return None

    def compute_sums(self, nodes: List[TreeNode]) -> Union[int, float]:
        """
        Recursively calculate the sum of every group, bottom-up.

        Returns the total of the given sibling list.
        """
        total = 0
        for node in nodes:
            if isinstance(node, GroupNode):
                node.sum = self.compute_sums(node.children)
                total = _add(total, node.sum)
            else:
                total = _add(total, parse_amount(get_field(node.record, self.amount_field)))
        return total


def _add(total, amount):
    try:
        return total + amount
    except TypeError:
        # Decimal does not mix with float
        return float(total) + float(amount)


def _same_key(a, b) -> bool:
    # True == 1 must not merge a boolean bucket with a numeric one
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    return a == b


def group_by_keys(
    records: Iterable[Record],
    keys: Sequence[str],
    locale: LocaleArg = None,
) -> List[TreeNode]:
    """Group records by keys with the configured field names."""
    return GroupBuilder().build(records, keys, locale)
