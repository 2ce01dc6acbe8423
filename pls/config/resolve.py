"""Fold configuration fragments into one ``EffectiveSpec``."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

from ..errors import ConfigError
from .types import LIST_OPTIONS, ConfigFragment, EffectiveSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Merged spec plus the fragments that were rejected along the way."""

    spec: EffectiveSpec
    errors: tuple[ConfigError, ...] = ()


def apply_fragment(spec: EffectiveSpec, fragment: ConfigFragment) -> EffectiveSpec:
    """Return ``spec`` with every option ``fragment`` sets written over it.

    Each option is replaced as a whole. List options marked as extend
    requests append the fragment's entries after the existing ones.
    """
    changes: dict[str, object] = {}
    for key, value in fragment.values.items():
        if key in fragment.extends and key in LIST_OPTIONS:
            changes[key] = tuple(getattr(spec, key)) + tuple(value)
        else:
            changes[key] = value
    if not changes:
        return spec
    return replace(spec, **changes)


def merge_fragments(fragments: Iterable[ConfigFragment], base: EffectiveSpec | None = None) -> EffectiveSpec:
    """Fold ``fragments`` lowest precedence first.

    Fragments are stably ordered by scope rank, so callers may pass several
    fragments of the same scope (ancestor directories, root first) and their
    relative order is kept.
    """
    spec = base if base is not None else EffectiveSpec()
    for fragment in sorted(fragments, key=lambda item: item.rank):
        spec = apply_fragment(spec, fragment)
        logger.debug("applied %s fragment from %s (%s)", fragment.scope.name.lower(), fragment.origin, ", ".join(fragment.values) or "empty")
    return spec


def resolve(candidates: Iterable[ConfigFragment | ConfigError]) -> Resolution:
    """Merge parsed fragments, skipping the ones that failed to parse.

    A rejected fragment contributes nothing, so each of its options keeps
    whatever the next-lower valid fragment set.
    """
    fragments: list[ConfigFragment] = []
    errors: list[ConfigError] = []
    for candidate in candidates:
        if isinstance(candidate, ConfigError):
            logger.warning("ignoring configuration %s", candidate)
            errors.append(candidate)
            continue
        fragments.append(candidate)
    return Resolution(spec=merge_fragments(fragments), errors=tuple(errors))


__all__ = ["Resolution", "apply_fragment", "merge_fragments", "resolve"]
