"""Enumerations shared by the configuration, collection and render stages."""

from __future__ import annotations

import stat
from enum import Enum


class FileType(Enum):
    """Kind of filesystem node, as reported without following symlinks.

    Declaration order is the order used by the ``type`` sort key.
    """

    DIR = "dir"
    SYMLINK = "symlink"
    FILE = "file"
    FIFO = "fifo"
    SOCKET = "socket"
    CHAR_DEVICE = "char_device"
    BLOCK_DEVICE = "block_device"
    UNKNOWN = "unknown"

    @classmethod
    def from_mode(cls, mode: int) -> "FileType":
        if stat.S_ISDIR(mode):
            return cls.DIR
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISREG(mode):
            return cls.FILE
        if stat.S_ISFIFO(mode):
            return cls.FIFO
        if stat.S_ISSOCK(mode):
            return cls.SOCKET
        if stat.S_ISCHR(mode):
            return cls.CHAR_DEVICE
        if stat.S_ISBLK(mode):
            return cls.BLOCK_DEVICE
        return cls.UNKNOWN

    @property
    def order(self) -> int:
        return _FILE_TYPE_ORDER[self]

    @property
    def suffix(self) -> str:
        return _FILE_TYPE_SUFFIXES.get(self, "")


_FILE_TYPE_ORDER = {file_type: index for index, file_type in enumerate(FileType)}
_FILE_TYPE_SUFFIXES = {
    FileType.DIR: "/",
    FileType.SYMLINK: "@",
    FileType.FIFO: "|",
    FileType.SOCKET: "=",
}


class GitStatus(Enum):
    """Version-control state of one entry.

    ``NONE`` means the listing is not inside a working tree. ``UNKNOWN`` marks
    an entry whose status could not be decoded.
    """

    UNMODIFIED = "unmodified"
    MODIFIED = "modified"
    STAGED = "staged"
    UNTRACKED = "untracked"
    IGNORED = "ignored"
    CONFLICTED = "conflicted"
    NONE = "none"
    UNKNOWN = "unknown"


class DetailField(Enum):
    """Detail columns that may precede the name column."""

    PERMISSIONS = "permissions"
    OWNER = "owner"
    GROUP = "group"
    SIZE = "size"
    MTIME = "mtime"
    GIT = "git"


class IconSet(Enum):
    """Named glyph sets for the icon column."""

    NERD = "nerd"
    UNICODE = "unicode"
    NONE = "none"


__all__ = ["FileType", "GitStatus", "DetailField", "IconSet"]
