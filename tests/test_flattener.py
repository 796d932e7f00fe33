"""
Unit tests for tree flattening.

Tests cover:
- Pre-order emission and level assignment
- has_children / expanded metadata
- Field copying for groups and leaves
- Serialized shape consumed by the rendering layer
"""
from dataclasses import dataclass

import pytest

from src.grouping.flattener import flatten_items
from src.grouping.models import GroupNode, Leaf


@pytest.fixture
def tree():
    """A hand-built two-level tree."""
    return [
        GroupNode(key="A", name="A", sum=3, children=[
            GroupNode(key=2023, name=2023, sum=3, children=[
                Leaf({"name": "x", "price": 1}),
                Leaf({"name": "y", "price": 2}),
            ]),
        ]),
        GroupNode(key="B", name="B", sum=4, children=[
            GroupNode(key=2024, name=2024, sum=4, children=[
                Leaf({"name": "z", "price": 4}),
            ]),
        ]),
    ]


class TestFlattenItems:

    def test_pre_order(self, tree):
        """Each group is followed by its whole subtree before the next sibling."""
        flat = flatten_items(tree)
        labels = [node.name for node in flat]
        assert labels == ["A", 2023, "x", "y", "B", 2024, "z"]

    def test_levels(self, tree):
        flat = flatten_items(tree)
        assert [node.level for node in flat] == [0, 1, 2, 2, 0, 1, 2]

    def test_has_children_only_for_groups(self, tree):
        flat = flatten_items(tree)
        assert [node.has_children for node in flat] == [True, True, False, False, True, True, False]

    def test_expanded_starts_false(self, tree):
        assert not any(node.expanded for node in flatten_items(tree))

    def test_length_is_total_node_count(self, tree):
        assert len(flatten_items(tree)) == 7

    def test_group_fields(self, tree):
        first = flatten_items(tree)[0]
        assert first.fields == {"key": "A", "name": "A", "sum": 3}
        assert first.key == "A"
        assert first.sum == 3

    def test_leaf_fields_are_copies(self, tree):
        flat = flatten_items(tree)
        leaf = flat[2]
        assert leaf.fields == {"name": "x", "price": 1}
        leaf.fields["price"] = 100
        assert tree[0].children[0].children[0].record["price"] == 1

    def test_tree_not_modified(self, tree):
        before = [node.to_dict() for node in tree]
        flatten_items(tree)
        assert [node.to_dict() for node in tree] == before

    def test_flat_leaves_at_level_zero(self):
        flat = flatten_items([Leaf({"name": "a"}), Leaf({"name": "b"})])
        assert [(n.level, n.has_children) for n in flat] == [(0, False), (0, False)]

    def test_empty_group_still_has_children(self):
        """has_children reflects the presence of a children collection."""
        flat = flatten_items([GroupNode(key="empty", name="empty")])
        assert flat[0].has_children is True

    def test_dataclass_records(self):
        @dataclass
        class Expense:
            name: str
            price: int

        flat = flatten_items([Leaf(Expense("lunch", 12))])
        assert flat[0].fields == {"name": "lunch", "price": 12}

    def test_empty_tree(self):
        assert flatten_items([]) == []


class TestDisplayNodeToDict:

    def test_group_row(self, tree):
        row = flatten_items(tree)[0].to_dict()
        assert row == {
            "key": "A",
            "name": "A",
            "sum": 3,
            "expanded": False,
            "level": 0,
            "hasChildren": True,
        }

    def test_leaf_row_has_no_children_key(self, tree):
        row = flatten_items(tree)[2].to_dict()
        assert "children" not in row
        assert row["hasChildren"] is False
        assert row["price"] == 1

    def test_record_children_field_not_copied(self):
        """A leaf record's own children field stays out of the display row."""
        record = {"name": "bundle", "price": 5, "children": [{"name": "part"}]}
        row = flatten_items([Leaf(record)])[0]

        assert "children" not in row.fields
        assert row.fields == {"name": "bundle", "price": 5}
        assert "children" in record
