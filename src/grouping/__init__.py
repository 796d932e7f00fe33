"""
Grouping module: multi-level grouping with subtotals and display flattening.
"""
from src.grouping.models import (
    AggregateOption,
    DisplayNode,
    GroupNode,
    Leaf,
    TreeNode,
)
from src.grouping.derived_keys import (
    GroupingKey,
    KeyKind,
    KeyResolver,
    ResolvedKey,
    parse_keys,
)
from src.grouping.comparator import (
    compare_values,
    insert_sorted,
    make_comparator,
)
from src.grouping.grouper import (
    GroupBuilder,
    group_by_keys,
)
from src.grouping.flattener import flatten_items
from src.grouping.aggregate import (
    aggregate,
    aggregate_to_dicts,
    find_aggregate_option,
    get_aggregate_options,
)

__all__ = [
    # Model
    "AggregateOption",
    "DisplayNode",
    "GroupNode",
    "Leaf",
    "TreeNode",
    # Key resolution
    "GroupingKey",
    "KeyKind",
    "KeyResolver",
    "ResolvedKey",
    "parse_keys",
    # Ordering
    "compare_values",
    "insert_sorted",
    "make_comparator",
    # Pipeline
    "GroupBuilder",
    "group_by_keys",
    "flatten_items",
    "aggregate",
    "aggregate_to_dicts",
    "find_aggregate_option",
    "get_aggregate_options",
]
