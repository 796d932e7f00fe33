"""
Public entry point: records → grouped tree → flat display list.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from src.core.data_context import DataContext, get_data_context
from src.core.locale_format import LocaleArg
from src.grouping.flattener import flatten_items
from src.grouping.grouper import GroupBuilder
from src.grouping.models import AggregateOption, DisplayNode, Record

logger = logging.getLogger(__name__)


def aggregate(
    records: Iterable[Record],
    keys: Sequence[str],
    locale: LocaleArg = None,
    builder: GroupBuilder = None,
) -> List[DisplayNode]:
    """
    Group records by keys, sum the amount field and flatten for display.

    Args:
        records: Flat records
        keys: Ordered grouping keys (may be empty)
        locale: Locale tag, formatter callable or object for month names
        builder: Custom GroupBuilder (field names); configured one if None

    Returns:
        Display nodes in pre-order with level, has_children and expanded=False
    """
    builder = builder or GroupBuilder()
    tree = builder.build(records, keys, locale)
    return flatten_items(tree)


def aggregate_to_dicts(
    records: Iterable[Record],
    keys: Sequence[str],
    locale: LocaleArg = None,
    builder: GroupBuilder = None,
) -> List[Dict[str, Any]]:
    """Same as aggregate(), serialized to plain dicts."""
    return [node.to_dict() for node in aggregate(records, keys, locale, builder)]


def get_aggregate_options(data_context: DataContext = None) -> List[AggregateOption]:
    """Table structures offered to the user, from the data dictionary."""
    context = data_context or get_data_context()
    options = []
    for preset in context.get_aggregate_presets():
        title = preset.get("title")
        keys = preset.get("keys") or []
        if not title:
            logger.warning(f"Skipping aggregate preset without title: {preset}")
            continue
        options.append(AggregateOption(title=str(title), keys=[str(k) for k in keys]))
    return options


def find_aggregate_option(title: str, data_context: DataContext = None) -> Optional[AggregateOption]:
    """Look up a preset by title (case-insensitive)."""
    wanted = title.strip().lower()
    for option in get_aggregate_options(data_context):
        if option.title.lower() == wanted:
            return option
    return None
