"""
Grouping data model.

The grouped tree is an explicit tagged union: a GroupNode holds either child
GroupNodes (more grouping keys remain) or Leaf wrappers around the original
records (last grouping level).
"""
import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Union

Record = Any
GroupKey = Union[str, int, float, None]


@dataclass
class GroupNode:
    """
    One bucket at one level of the hierarchy.

    `key` is the raw grouping value used for equality and sorting; `name`
    is the display label (a localized month name for the month key).
    """
    key: GroupKey
    name: Any
    sum: Union[int, float] = 0
    children: List["TreeNode"] = field(default_factory=list)

    def to_dict(self, include_children: bool = True) -> Dict[str, Any]:
        result = {"key": self.key, "name": self.name, "sum": self.sum}
        if include_children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass
class Leaf:
    """An original record placed at the last grouping level."""
    record: Record

    def fields(self) -> Dict[str, Any]:
        """Shallow copy of the record's fields."""
        return record_fields(self.record)

    def to_dict(self) -> Dict[str, Any]:
        return self.fields()


TreeNode = Union[GroupNode, Leaf]


@dataclass
class DisplayNode:
    """
    Flattened, presentation-ready projection of a tree node.

    `fields` carries key/name/sum for groups, or the record's own fields for
    leaves. `expanded` is owned by the rendering layer after creation.
    """
    fields: Dict[str, Any]
    level: int
    has_children: bool
    expanded: bool = False

    @property
    def key(self) -> Any:
        return self.fields.get("key")

    @property
    def name(self) -> Any:
        return self.fields.get("name")

    @property
    def sum(self) -> Any:
        return self.fields.get("sum")

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.fields,
            "expanded": self.expanded,
            "level": self.level,
            "hasChildren": self.has_children,
        }


@dataclass
class AggregateOption:
    """A titled table structure the user can pick, e.g. "Year / Month"."""
    title: str
    keys: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "value": {"aggregate": list(self.keys)}}


def record_fields(record: Record) -> Dict[str, Any]:
    """Read all fields of a record as a new dict."""
    if isinstance(record, Mapping):
        return dict(record)
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return {f.name: getattr(record, f.name) for f in dataclasses.fields(record)}
    return dict(vars(record))


_MISSING = object()


def get_field(record: Record, name: str, default: Any = None) -> Any:
    """Read a single field from a mapping or attribute-bearing record."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    value = getattr(record, name, _MISSING)
    return default if value is _MISSING else value


def has_field(record: Record, name: str) -> bool:
    if isinstance(record, Mapping):
        return name in record
    return hasattr(record, name)
