"""Ordering hooks for attributes and rendered entries.

Both hooks take either a key function or a classic two-argument comparator.
Sorting is stable, so attributes that compare equal keep discovery order.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Iterable, TypeVar

from .core.models import AttributeDescriptor, Entry

T = TypeVar("T")

SortKey = Callable[[Any], Any]
Comparator = Callable[[Any, Any], int]


def as_sort_key(
    comparator: Comparator | None = None,
    key: SortKey | None = None,
) -> SortKey | None:
    """Normalize a comparator or key function into a key function.

    Raises:
        ValueError: If both a comparator and a key are given.
    """
    if comparator is not None and key is not None:
        raise ValueError("Pass either a comparator or a key, not both")
    if comparator is not None:
        return cmp_to_key(comparator)
    return key


def _ordered(items: Iterable[T], key: SortKey | None) -> list[T]:
    if key is None:
        return list(items)
    return sorted(items, key=key)


def order_attributes(
    descriptors: Iterable[AttributeDescriptor], key: SortKey | None
) -> list[AttributeDescriptor]:
    return _ordered(descriptors, key)


def order_entries(entries: Iterable[Entry], key: SortKey | None) -> list[Entry]:
    return _ordered(entries, key)
