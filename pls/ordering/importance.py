"""Importance promotion: stable partition of promoting matches to the front."""

from __future__ import annotations

from collections.abc import Sequence

from ..config import EffectiveSpec, ImportancePattern
from ..metadata import EnrichedEntry


def importance_matches(entries: Sequence[EnrichedEntry], spec: EffectiveSpec) -> dict[int, ImportancePattern]:
    """Map entry index to the first importance pattern its name matches."""
    matches: dict[int, ImportancePattern] = {}
    for index, entry in enumerate(entries):
        pattern = spec.importance_match(entry.name)
        if pattern is not None:
            matches[index] = pattern
    return matches


def promote_important(order: Sequence[int], matches: dict[int, ImportancePattern]) -> list[int]:
    """Move indices with a positive importance level ahead of the rest.

    Both groups keep their order. Matches at level zero or below stay put.
    """
    promoted = [index for index in order if index in matches and matches[index].promotes]
    rest = [index for index in order if index not in matches or not matches[index].promotes]
    return promoted + rest


__all__ = ["importance_matches", "promote_important"]
