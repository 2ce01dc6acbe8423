"""Error taxonomy shared by every pipeline stage.

Only ``EnumerationError`` is fatal. The others are absorbed at the boundary of
the stage that raised them: config errors drop a fragment, entry errors drop
an entry (or mark its git status unknown), render errors fall back to plain
output.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class PlsError(Exception):
    """Base class for all errors raised by the listing pipeline."""


class ConfigError(PlsError):
    """A configuration fragment could not be parsed or merged.

    ``origin`` names the offending fragment (a file path or a label such as
    ``<cli>``) so the diagnostic can point at it.
    """

    def __init__(self, origin: str, reason: str, *, key: str | None = None) -> None:
        self.origin = origin
        self.reason = reason
        self.key = key
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.key is not None:
            return f"{self.origin}: `{self.key}`: {self.reason}"
        return f"{self.origin}: {self.reason}"


class EnumerationErrorKind(Enum):
    NOT_FOUND = "not found"
    NOT_A_DIRECTORY = "not a directory"
    PERMISSION_DENIED = "permission denied"
    OTHER = "cannot be read"


class EnumerationError(PlsError):
    """The target directory cannot be listed."""

    def __init__(self, path: Path, kind: EnumerationErrorKind, detail: str | None = None) -> None:
        self.path = path
        self.kind = kind
        self.detail = detail
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.detail:
            return f"{self.path}: {self.detail}"
        return f"{self.path}: {self.kind.value}"

    @classmethod
    def from_os_error(cls, path: Path, exc: OSError) -> "EnumerationError":
        """Map an ``OSError`` from a directory scan onto the typed kinds."""
        if isinstance(exc, FileNotFoundError):
            return cls(path, EnumerationErrorKind.NOT_FOUND)
        if isinstance(exc, NotADirectoryError):
            return cls(path, EnumerationErrorKind.NOT_A_DIRECTORY)
        if isinstance(exc, PermissionError):
            return cls(path, EnumerationErrorKind.PERMISSION_DENIED)
        return cls(path, EnumerationErrorKind.OTHER, detail=(exc.strerror or str(exc)).lower())


class EntryError(PlsError):
    """Metadata or status lookup failed for a single entry."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


class RenderError(PlsError):
    """The output capability descriptor is missing or unusable."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


__all__ = [
    "PlsError",
    "ConfigError",
    "EnumerationErrorKind",
    "EnumerationError",
    "EntryError",
    "RenderError",
]
