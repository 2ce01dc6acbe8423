"""Configuration datatypes: scoped fragments and the merged effective spec."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType

from ..enums import DetailField, FileType, GitStatus
from ..patterns import NamePattern
from ..styles import Style


class Scope(IntEnum):
    """Where a fragment came from; the value is its precedence rank."""

    BUILTIN = 0
    USER = 1
    ANCESTOR = 2
    LOCAL = 3
    CLI = 4


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool = False

    def __str__(self) -> str:
        return f"-{self.field}" if self.descending else self.field


@dataclass(frozen=True)
class RulePredicate:
    """Conjunction of optional tests against one entry.

    An empty predicate matches everything.
    """

    pattern: NamePattern | None = None
    ext: str | None = None
    file_type: FileType | None = None
    git: GitStatus | None = None

    def matches(self, name: str, ext: str, file_type: FileType, git_status: GitStatus) -> bool:
        if self.pattern is not None and not self.pattern.matches(name):
            return False
        if self.ext is not None and self.ext != ext.lower():
            return False
        if self.file_type is not None and self.file_type is not file_type:
            return False
        if self.git is not None and self.git is not git_status:
            return False
        return True


@dataclass(frozen=True)
class StyleRule:
    predicate: RulePredicate
    style: Style


@dataclass(frozen=True)
class IconRule:
    predicate: RulePredicate
    icon: str


@dataclass(frozen=True)
class ImportancePattern:
    """Importance of names matching ``pattern``.

    Positive levels promote the entry, negative levels dim it, and a level
    below ``EffectiveSpec.min_importance`` hides it.
    """

    pattern: NamePattern
    style: Style | None = None
    level: int = 1

    @property
    def promotes(self) -> bool:
        return self.level > 0


# Options whose value is a list and may be extended instead of replaced.
LIST_OPTIONS = frozenset({"colors", "importance", "icon_rules"})


@dataclass(frozen=True)
class ConfigFragment:
    """A validated partial configuration from one source.

    ``values`` holds only the options the source set, already converted to
    the types ``EffectiveSpec`` uses. ``extends`` names the list options the
    source asked to append to rather than replace.
    """

    scope: Scope
    origin: str
    values: Mapping[str, object] = field(default_factory=dict)
    extends: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @property
    def rank(self) -> int:
        return int(self.scope)


@dataclass(frozen=True)
class EffectiveSpec:
    """Fully merged, read-only configuration for one invocation."""

    icons: str = "none"
    colors: tuple[StyleRule, ...] = ()
    detail: tuple[DetailField, ...] = ()
    sort: tuple[SortKey, ...] = ()
    importance: tuple[ImportancePattern, ...] = ()
    collapse: bool = False
    icon_rules: tuple[IconRule, ...] = ()
    hidden: bool = False
    only: NamePattern | None = None
    exclude: NamePattern | None = None
    header: bool = False
    min_importance: int = -1
    types: frozenset[FileType] | None = None

    def importance_match(self, name: str) -> ImportancePattern | None:
        """Return the first importance pattern matching ``name``."""
        for candidate in self.importance:
            if candidate.pattern.matches(name):
                return candidate
        return None

    def is_visible(self, name: str) -> bool:
        """Apply the hidden-entry, only/exclude and importance filters to ``name``."""
        if not self.hidden and name.startswith("."):
            return False
        if self.only is not None and not self.only.matches(name):
            return False
        if self.exclude is not None and self.exclude.matches(name):
            return False
        match = self.importance_match(name)
        if match is not None and match.level < self.min_importance:
            return False
        return True

    def shows_type(self, file_type: FileType) -> bool:
        return self.types is None or file_type in self.types


__all__ = [
    "Scope",
    "SortKey",
    "RulePredicate",
    "StyleRule",
    "IconRule",
    "ImportancePattern",
    "LIST_OPTIONS",
    "ConfigFragment",
    "EffectiveSpec",
]
