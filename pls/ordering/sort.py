"""Multi-key stable sorting of listing entries."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from ..config import SortKey
from ..metadata import EnrichedEntry


def canonical_name(name: str) -> str:
    """Lower-case ``name`` with leading non-alphanumeric characters stripped."""
    lowered = name.lower()
    index = 0
    while index < len(lowered) and not lowered[index].isalnum():
        index += 1
    return lowered[index:]


SORT_VALUES: dict[str, Callable[[EnrichedEntry], object]] = {
    "cat": lambda entry: 0 if entry.is_dir else 1,
    "name": lambda entry: entry.name,
    "cname": lambda entry: canonical_name(entry.name),
    "size": lambda entry: entry.raw.size,
    "mtime": lambda entry: entry.raw.mtime_ns,
    "type": lambda entry: entry.file_type.order,
    "extension": lambda entry: entry.ext.lower(),
}


def sort_indices(entries: Sequence[EnrichedEntry], indices: Sequence[int], keys: Sequence[SortKey]) -> list[int]:
    """Return ``indices`` ordered by ``keys``, first key most significant.

    Sorting runs once per key from the least significant one up. Python's
    sort is stable in both directions, so entries equal under every key keep
    the order they arrived in.
    """
    order = list(indices)
    for key in reversed(keys):
        value = SORT_VALUES[key.field]
        order.sort(key=lambda index: value(entries[index]), reverse=key.descending)
    return order


__all__ = ["SORT_VALUES", "canonical_name", "sort_indices"]
