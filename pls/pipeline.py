"""Compose the four listing stages behind one call.

``list_directory`` resolves configuration for the target, collects its
entries, orders them and renders them for the output capability. Every
collaborator the stages talk to can be replaced, which is how the tests run
the whole pipeline without a terminal or a git binary.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import ConfigFragment, EffectiveSpec, collect_fragments, resolve
from .errors import ConfigError
from .metadata import DirectoryLister, GitStatusSource, Listing, MetadataCollector
from .ordering import OrderedEntry, order_entries
from .render import Capability, Row, probe_capability, render_listing

logger = logging.getLogger(__name__)

ConfigSources = Callable[[Path, Mapping[str, object] | None], Sequence[ConfigFragment | ConfigError]]


@dataclass(frozen=True)
class ListingResult:
    """Everything one invocation produced, ready to be written out."""

    directory: Path
    spec: EffectiveSpec
    listing: Listing
    ordered: tuple[OrderedEntry, ...]
    rows: tuple[Row, ...]
    lines: tuple[str, ...]
    capability: Capability
    plain: bool
    config_errors: tuple[ConfigError, ...] = ()

    @property
    def dropped(self) -> int:
        return self.listing.dropped


def _default_config_sources(directory: Path, overrides: Mapping[str, object] | None) -> list[ConfigFragment | ConfigError]:
    return collect_fragments(directory, overrides)


def list_directory(
    target: str | Path,
    overrides: Mapping[str, object] | None = None,
    capability: Capability | None = None,
    *,
    lister: DirectoryLister | None = None,
    vcs: GitStatusSource | None = None,
    config_sources: ConfigSources | None = None,
    max_workers: int | None = None,
) -> ListingResult:
    """List ``target`` and return its rendered rows.

    Raises ``EnumerationError`` when ``target`` cannot be listed; nothing has
    been written at that point. Configuration, per-entry and capability
    problems are absorbed and reported on the result instead.
    """
    directory = Path(target).expanduser().resolve()
    sources = config_sources if config_sources is not None else _default_config_sources

    resolution = resolve(sources(directory, overrides))
    spec = resolution.spec
    logger.debug("effective configuration for %s: %s", directory, spec)

    collector = MetadataCollector(lister=lister, vcs=vcs, max_workers=max_workers)
    listing = collector.collect(directory, spec)
    ordered = order_entries(listing, spec)

    if capability is None:
        capability = probe_capability()
    rendered = render_listing(ordered, spec, capability)

    return ListingResult(
        directory=directory,
        spec=spec,
        listing=listing,
        ordered=ordered,
        rows=rendered.rows,
        lines=rendered.lines,
        capability=rendered.capability,
        plain=rendered.plain,
        config_errors=resolution.errors,
    )


def render_lines(result: ListingResult) -> list[str]:
    """Return the text lines for ``result`` in output order."""
    return list(result.lines)


def drop_summary(result: ListingResult) -> str | None:
    """Return the trailing diagnostic for dropped entries, if any were dropped."""
    if not result.dropped:
        return None
    noun = "entry" if result.dropped == 1 else "entries"
    return f"{result.dropped} {noun} could not be read"


__all__ = ["ConfigSources", "ListingResult", "drop_summary", "list_directory", "render_lines"]
