"""Datatypes produced by the ordering stage."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import ImportancePattern
from ..metadata import EnrichedEntry


@dataclass(frozen=True)
class OrderedEntry:
    """One listing row in its final position.

    ``chain`` holds the path segments of a collapsed single-child run,
    starting with this entry's own name; ``leaf`` is the entry at the end of
    that run. Both are empty for uncollapsed rows.
    """

    entry: EnrichedEntry
    rank: int
    chain: tuple[str, ...] = ()
    leaf: EnrichedEntry | None = None
    importance: ImportancePattern | None = None

    @property
    def label(self) -> str:
        if self.chain:
            return "/".join(self.chain)
        return self.entry.name

    @property
    def shown(self) -> EnrichedEntry:
        """The entry whose metadata the row displays."""
        return self.leaf if self.leaf is not None else self.entry


__all__ = ["OrderedEntry"]
