"""Domain datatypes for collected directory entries."""

from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from pathlib import Path

from ..enums import FileType, GitStatus


class SymlinkState(Enum):
    OK = "ok"
    BROKEN = "broken"
    CYCLIC = "cyclic"
    ERROR = "error"


@dataclass(frozen=True)
class RawEntry:
    """Metadata observed for one path without following symlinks."""

    path: Path
    file_type: FileType
    size: int
    mtime_ns: int
    mode: int
    uid: int
    gid: int
    symlink_target: str | None = None

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class EnrichedEntry:
    """A ``RawEntry`` with normalized ownership, permissions and git status."""

    raw: RawEntry
    permissions: str
    owner: str
    group: str
    git_status: GitStatus = GitStatus.NONE

    @property
    def name(self) -> str:
        return self.raw.path.name

    @property
    def path(self) -> Path:
        return self.raw.path

    @property
    def file_type(self) -> FileType:
        return self.raw.file_type

    @property
    def is_dir(self) -> bool:
        return self.raw.file_type is FileType.DIR

    @property
    def ext(self) -> str:
        suffix = Path(self.name).suffix
        return suffix[1:] if suffix else ""

    @cached_property
    def symlink_state(self) -> SymlinkState | None:
        """Target state for symlinks, resolved on first access only."""
        if self.raw.file_type is not FileType.SYMLINK:
            return None
        try:
            os.stat(self.raw.path)
        except FileNotFoundError:
            return SymlinkState.BROKEN
        except OSError as exc:
            if exc.errno == errno.ELOOP:
                return SymlinkState.CYCLIC
            return SymlinkState.ERROR
        return SymlinkState.OK


@dataclass(frozen=True)
class Listing:
    """Everything one collection pass produced for a directory.

    ``entries`` is a flat array. Its first ``top_level_count`` items are the
    directory's visible children in enumeration order; any later items were
    found while probing single-child directory chains and point at their
    directory through ``parents``. ``child_counts`` holds the number of
    visible children for every probed directory and ``None`` elsewhere.
    """

    directory: Path
    entries: tuple[EnrichedEntry, ...]
    parents: tuple[int | None, ...]
    child_counts: tuple[int | None, ...]
    top_level_count: int
    dropped: int = 0
    repository_root: Path | None = None

    def top_level(self) -> range:
        return range(self.top_level_count)


__all__ = ["SymlinkState", "RawEntry", "EnrichedEntry", "Listing"]
