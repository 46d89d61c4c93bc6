"""Generic reducers over record collections (dicts or dataclasses)"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Sequence, TypeVar

from lease_analytics.utils.formatters import safe_number

T = TypeVar("T")


def pick(item: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an attribute-style record"""
    if isinstance(item, Mapping):
        return item.get(name, default)
    return getattr(item, name, default)


def _is_collection(items: Any) -> bool:
    return isinstance(items, (list, tuple))


def sum_by(items: Sequence[T], selector: Callable[[T], Any]) -> float:
    """Sum selector(item) over items; non-numeric results count as 0"""
    if not _is_collection(items):
        return 0
    return sum((safe_number(selector(item)) for item in items), 0)


def avg_by(items: Sequence[T], selector: Callable[[T], Any]) -> float:
    """Average of selector(item); 0 for an empty collection"""
    if not _is_collection(items) or len(items) == 0:
        return 0
    return sum_by(items, selector) / len(items)


def group_by_month(items: Sequence[T], month_field: str = "month") -> Dict[str, List[T]]:
    """
    Partition items by their month key.

    Groups keep insertion order; items without a month key are dropped.
    """
    groups: Dict[str, List[T]] = {}
    if not _is_collection(items):
        return groups

    for item in items:
        month = pick(item, month_field)
        if not month:
            continue
        groups.setdefault(month, []).append(item)

    return groups


def top_n(items: Sequence[T], selector: Callable[[T], Any], n: int = 3) -> List[T]:
    """Top n items by selector, descending; ties keep their original order"""
    if not _is_collection(items):
        return []
    # sorted() is stable, so equal keys stay in input order
    ranked = sorted(items, key=lambda item: safe_number(selector(item)), reverse=True)
    return ranked[: max(n, 0)]
