"""Filesystem enumeration and per-entry stat helpers."""

from __future__ import annotations

import grp
import os
import pwd
import stat
from functools import lru_cache
from pathlib import Path

from ..enums import FileType
from ..errors import EntryError, EnumerationError
from .types import RawEntry


def symbolic_permissions(mode: int) -> str:
    """Return ``ls -l`` style permission text such as ``drwxr-xr-x``."""
    return stat.filemode(mode)


@lru_cache(maxsize=256)
def owner_name(uid: int) -> str:
    """Return the user name for ``uid`` or the numeric id when it has none."""
    try:
        return pwd.getpwuid(uid).pw_name
    except (KeyError, OverflowError):
        return str(uid)


@lru_cache(maxsize=256)
def group_name(gid: int) -> str:
    """Return the group name for ``gid`` or the numeric id when it has none."""
    try:
        return grp.getgrgid(gid).gr_name
    except (KeyError, OverflowError):
        return str(gid)


class DirectoryLister:
    """Default enumeration collaborator backed by ``os.scandir``/``os.lstat``."""

    def list_names(self, directory: Path) -> list[str]:
        """Return the names of ``directory``'s direct children in scan order.

        Raises ``EnumerationError`` when the directory is missing, not a
        directory, or unreadable.
        """
        try:
            with os.scandir(directory) as entries:
                return [entry.name for entry in entries]
        except OSError as exc:
            raise EnumerationError.from_os_error(directory, exc) from exc

    def stat(self, path: Path) -> RawEntry:
        """Return ``path``'s own metadata without following symlinks.

        ``FileNotFoundError`` propagates so callers can tell a vanished entry
        from a failed lookup, which raises ``EntryError``.
        """
        try:
            st = os.lstat(path)
        except FileNotFoundError:
            raise
        except OSError as exc:
            raise EntryError(path, f"cannot stat: {exc.strerror or exc}") from exc

        file_type = FileType.from_mode(st.st_mode)
        symlink_target: str | None = None
        if file_type is FileType.SYMLINK:
            try:
                symlink_target = os.readlink(path)
            except FileNotFoundError:
                raise
            except OSError as exc:
                raise EntryError(path, f"cannot read link: {exc.strerror or exc}") from exc

        return RawEntry(
            path=path,
            file_type=file_type,
            size=int(st.st_size),
            mtime_ns=int(st.st_mtime_ns),
            mode=int(st.st_mode),
            uid=int(st.st_uid),
            gid=int(st.st_gid),
            symlink_target=symlink_target,
        )


__all__ = ["DirectoryLister", "group_name", "owner_name", "symbolic_permissions"]
