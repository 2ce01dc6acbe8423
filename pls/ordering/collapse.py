"""Single-child directory chain collapsing.

Runs as an explicit post-order walk over the listing's index tree so a deep
chain never grows the Python call stack.
"""

from __future__ import annotations

from collections.abc import Collection

from ..metadata import Listing


def _children_by_parent(listing: Listing) -> dict[int, list[int]]:
    children: dict[int, list[int]] = {}
    for index, parent in enumerate(listing.parents):
        if parent is not None:
            children.setdefault(parent, []).append(index)
    return children


def collapse_chains(listing: Listing, important: Collection[int]) -> dict[int, tuple[int, ...]]:
    """Return, for each top-level index, the run of indices its row covers.

    A directory absorbs its only child when neither of them is in
    ``important``; the absorbed child may in turn absorb its own only child.
    Rows that absorb nothing map to a one-element tuple.
    """
    children = _children_by_parent(listing)
    tails: dict[int, tuple[int, ...]] = {}

    stack: list[tuple[int, bool]] = [(root, False) for root in listing.top_level()]
    while stack:
        index, expanded = stack.pop()
        if not expanded:
            stack.append((index, True))
            for child in children.get(index, ()):
                stack.append((child, False))
            continue

        tail: tuple[int, ...] = (index,)
        only = children.get(index, [])
        if (
            listing.entries[index].is_dir
            and listing.child_counts[index] == 1
            and len(only) == 1
            and index not in important
            and only[0] not in important
        ):
            tail = (index,) + tails[only[0]]
        tails[index] = tail

    return {root: tails[root] for root in listing.top_level()}


__all__ = ["collapse_chains"]
