"""
Tree flattening.

Produces the pre-order, depth-first display sequence the rendering layer
consumes. Each node is emitted before its children; top-level nodes have
level 0.
"""
import logging
from typing import List, Sequence

from src.grouping.models import DisplayNode, GroupNode, TreeNode

logger = logging.getLogger(__name__)


def flatten_items(items: Sequence[TreeNode]) -> List[DisplayNode]:
    """
    Flatten a grouped tree into display nodes.

    Args:
        items: Top-level nodes from the grouper (GroupNodes, or Leafs when
            no grouping keys were given)

    Returns:
        One DisplayNode per group and per record, in pre-order. The input
        tree is not modified.
    """
    formatted: List[DisplayNode] = []

    def format_item(item: TreeNode, level: int):
        if isinstance(item, GroupNode):
            formatted.append(DisplayNode(
                fields=item.to_dict(include_children=False),
                level=level,
                has_children=True,
            ))
            for child in item.children:
                format_item(child, level + 1)
        else:
            fields = item.fields()
            # A record's own "children" field is not a tree collection
            fields.pop("children", None)
            formatted.append(DisplayNode(fields=fields, level=level, has_children=False))

    for item in items:
        format_item(item, 0)

    return formatted
