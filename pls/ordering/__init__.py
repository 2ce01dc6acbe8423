"""Ordering stage: sort, importance promotion and chain collapsing.

``order_entries`` is the stage entrypoint; the submodules hold the three
passes it runs in sequence.
"""

from __future__ import annotations

import logging

from ..config import EffectiveSpec
from ..metadata import Listing
from .collapse import collapse_chains
from .importance import importance_matches, promote_important
from .sort import SORT_VALUES, canonical_name, sort_indices
from .types import OrderedEntry

logger = logging.getLogger(__name__)


def order_entries(listing: Listing, spec: EffectiveSpec) -> tuple[OrderedEntry, ...]:
    """Return the listing's top-level entries in presentation order.

    The base sort applies ``spec.sort``; positive-level importance matches
    then move to the front without disturbing the sorted order inside either
    group. With ``spec.collapse`` set, single-child directory runs become one
    row.
    """
    entries = listing.entries
    order = sort_indices(entries, listing.top_level(), spec.sort)
    matches = importance_matches(entries, spec)
    order = promote_important(order, matches)

    chains: dict[int, tuple[int, ...]] = {}
    if spec.collapse:
        chains = collapse_chains(listing, matches.keys())

    ordered: list[OrderedEntry] = []
    for rank, index in enumerate(order):
        run = chains.get(index, (index,))
        if len(run) > 1:
            ordered.append(
                OrderedEntry(
                    entry=entries[index],
                    rank=rank,
                    chain=tuple(entries[member].name for member in run),
                    leaf=entries[run[-1]],
                    importance=matches.get(index),
                )
            )
            continue
        ordered.append(OrderedEntry(entry=entries[index], rank=rank, importance=matches.get(index)))

    logger.debug(
        "ordered %d entries (%d important, %d collapsed)",
        len(ordered),
        sum(1 for item in ordered if item.importance is not None and item.importance.promotes),
        sum(1 for item in ordered if item.chain),
    )
    return tuple(ordered)


__all__ = [
    "OrderedEntry",
    "SORT_VALUES",
    "canonical_name",
    "collapse_chains",
    "importance_matches",
    "order_entries",
    "promote_important",
    "sort_indices",
]
