"""Metadata collection: enumerate a directory and enrich every entry.

Per-entry work (stat, ownership lookup, status decoding) fans out over a
thread pool. Results are joined and put back into enumeration order before
they leave this module, so completion order never leaks into the listing.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from ..config import EffectiveSpec
from ..enums import FileType, GitStatus
from ..errors import EntryError, EnumerationError
from .fs import DirectoryLister, group_name, owner_name, symbolic_permissions
from .git import GitStatusSource, attribute_codes, decode_status_code, most_significant
from .types import EnrichedEntry, Listing, RawEntry

logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_R = TypeVar("_R")


def default_worker_count() -> int:
    return max(1, os.cpu_count() or 1)


def _map_ordered(executor: ThreadPoolExecutor, func: Callable[[_T], _R], items: Sequence[_T]) -> list[_R]:
    """Run ``func`` over ``items`` and return results in input order.

    Waits for every task before reading any result.
    """
    futures: list[tuple[int, Future[_R]]] = [(index, executor.submit(func, item)) for index, item in enumerate(items)]
    wait([future for _index, future in futures])
    ordered = sorted(futures, key=lambda pair: pair[0])
    return [future.result() for _index, future in ordered]


@dataclass(frozen=True)
class _StatOutcome:
    raw: RawEntry | None
    error: EntryError | None = None


@dataclass(frozen=True)
class _Node:
    raw: RawEntry
    parent: int | None
    child_count: int | None = None


class MetadataCollector:
    """Build a ``Listing`` for one directory.

    ``lister`` and ``vcs`` are the enumeration and version-control
    collaborators; tests substitute fakes for both.
    """

    def __init__(
        self,
        lister: DirectoryLister | None = None,
        vcs: GitStatusSource | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.lister = lister if lister is not None else DirectoryLister()
        self.vcs = vcs if vcs is not None else GitStatusSource()
        self.max_workers = max_workers if max_workers is not None else default_worker_count()

    def _stat(self, path: Path) -> _StatOutcome:
        try:
            return _StatOutcome(raw=self.lister.stat(path))
        except FileNotFoundError:
            return _StatOutcome(raw=None)
        except EntryError as exc:
            return _StatOutcome(raw=None, error=exc)

    def _visible_names(self, directory: Path, spec: EffectiveSpec) -> list[str]:
        return [name for name in self.lister.list_names(directory) if spec.is_visible(name)]

    def _probe_chain(self, directory: RawEntry, spec: EffectiveSpec) -> list[tuple[RawEntry, int | None]]:
        """Follow single-child directories below ``directory``.

        Returns ``(entry, child_count)`` pairs starting with ``directory``
        itself. Probing stops at a directory with zero or several visible
        children, at a non-directory, or at anything that cannot be read.
        """
        chain: list[tuple[RawEntry, int | None]] = []
        current = directory
        while True:
            if current.file_type is not FileType.DIR:
                chain.append((current, None))
                return chain
            try:
                names = self._visible_names(current.path, spec)
            except EnumerationError as exc:
                logger.debug("not probing %s: %s", current.path, exc)
                chain.append((current, None))
                return chain
            chain.append((current, len(names)))
            if len(names) != 1:
                return chain
            outcome = self._stat(current.path / names[0])
            if outcome.raw is None:
                if outcome.error is not None:
                    logger.debug("not probing past %s: %s", current.path, outcome.error)
                return chain
            current = outcome.raw

    def _statuses(self, directory: Path, repo_root: Path | None, nodes: list[_Node]) -> list[Callable[[], GitStatus]]:
        """Prepare one status thunk per node from a single batched query."""
        if repo_root is None:
            return [lambda: GitStatus.NONE for _node in nodes]

        rel_paths = [node.raw.path.relative_to(repo_root).as_posix() for node in nodes]
        top_rel_paths = [rel for node, rel in zip(nodes, rel_paths) if node.parent is None]
        try:
            codes = self.vcs.status_codes(repo_root, top_rel_paths)
        except EntryError as exc:
            logger.warning("cannot read git status for %s: %s", directory, exc)
            return [lambda: GitStatus.UNKNOWN for _node in nodes]

        def decoder(node: _Node, rel_path: str) -> Callable[[], GitStatus]:
            def decode() -> GitStatus:
                try:
                    return most_significant([decode_status_code(code) for code in attribute_codes(codes, rel_path)])
                except ValueError as exc:
                    logger.warning("%s", EntryError(node.raw.path, str(exc)))
                    return GitStatus.UNKNOWN

            return decode

        return [decoder(node, rel) for node, rel in zip(nodes, rel_paths)]

    @staticmethod
    def _enrich(job: tuple[RawEntry, Callable[[], GitStatus]]) -> EnrichedEntry:
        raw, status = job
        return EnrichedEntry(
            raw=raw,
            permissions=symbolic_permissions(raw.mode),
            owner=owner_name(raw.uid),
            group=group_name(raw.gid),
            git_status=status(),
        )

    def collect(self, directory: Path, spec: EffectiveSpec) -> Listing:
        """Enumerate ``directory`` and return its enriched listing.

        Raises ``EnumerationError`` before doing any other work when the
        directory itself cannot be listed.
        """
        names = self._visible_names(directory, spec)
        repo_root = self.vcs.repository_root(directory)
        logger.debug("collecting %d entries from %s (repository: %s)", len(names), directory, repo_root)

        dropped = 0
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            outcomes = _map_ordered(executor, self._stat, [directory / name for name in names])
            top_level: list[RawEntry] = []
            for outcome in outcomes:
                if outcome.error is not None:
                    logger.warning("dropping %s", outcome.error)
                    dropped += 1
                if outcome.raw is not None and spec.shows_type(outcome.raw.file_type):
                    top_level.append(outcome.raw)

            nodes = [_Node(raw=raw, parent=None) for raw in top_level]
            if spec.collapse:
                chains = _map_ordered(executor, lambda raw: self._probe_chain(raw, spec), top_level)
                for index, chain in enumerate(chains):
                    (_head, head_count), rest = chain[0], chain[1:]
                    nodes[index] = _Node(raw=nodes[index].raw, parent=None, child_count=head_count)
                    parent = index
                    for raw, child_count in rest:
                        nodes.append(_Node(raw=raw, parent=parent, child_count=child_count))
                        parent = len(nodes) - 1

            statuses = self._statuses(directory, repo_root, nodes)
            entries = _map_ordered(executor, self._enrich, list(zip([node.raw for node in nodes], statuses)))

        return Listing(
            directory=directory,
            entries=tuple(entries),
            parents=tuple(node.parent for node in nodes),
            child_counts=tuple(node.child_count for node in nodes),
            top_level_count=len(top_level),
            dropped=dropped,
            repository_root=repo_root,
        )


__all__ = ["MetadataCollector", "default_worker_count"]
