"""First-match-wins lookups in the style and icon rule tables.

Each table is an ordered list of (predicate, result) pairs. The first rule
whose predicate holds for the entry decides; when none does, the entry's
file type supplies the default.
"""

from __future__ import annotations

import stat
from collections.abc import Sequence
from typing import TypeVar

from ..config import EffectiveSpec, IconRule, RulePredicate, StyleRule
from ..enums import FileType, GitStatus
from ..metadata import EnrichedEntry
from ..styles import PLAIN_STYLE, Style, parse_style

_Rule = TypeVar("_Rule", StyleRule, IconRule)

TYPE_STYLES: dict[FileType, Style] = {
    FileType.DIR: parse_style("bold blue"),
    FileType.SYMLINK: parse_style("cyan"),
    FileType.FIFO: parse_style("yellow"),
    FileType.SOCKET: parse_style("magenta"),
    FileType.CHAR_DEVICE: parse_style("bold yellow"),
    FileType.BLOCK_DEVICE: parse_style("bold yellow"),
    FileType.UNKNOWN: parse_style("red"),
}
EXECUTABLE_STYLE = parse_style("bold green")
BROKEN_SYMLINK_STYLE = parse_style("red")

TYPE_ICONS: dict[FileType, str] = {
    FileType.DIR: "dir",
    FileType.SYMLINK: "symlink",
    FileType.FIFO: "fifo",
    FileType.SOCKET: "socket",
    FileType.CHAR_DEVICE: "char_device",
    FileType.BLOCK_DEVICE: "block_device",
    FileType.FILE: "file",
}

GIT_MARKERS: dict[GitStatus, str] = {
    GitStatus.UNMODIFIED: "-",
    GitStatus.MODIFIED: "M",
    GitStatus.STAGED: "+",
    GitStatus.UNTRACKED: "?",
    GitStatus.IGNORED: "!",
    GitStatus.CONFLICTED: "C",
    GitStatus.UNKNOWN: "~",
    GitStatus.NONE: "",
}

GIT_STYLES: dict[GitStatus, Style] = {
    GitStatus.UNMODIFIED: parse_style("dimmed"),
    GitStatus.MODIFIED: parse_style("color(214)"),
    GitStatus.STAGED: parse_style("green"),
    GitStatus.UNTRACKED: parse_style("color(42)"),
    GitStatus.IGNORED: parse_style("dimmed"),
    GitStatus.CONFLICTED: parse_style("bold red"),
    GitStatus.UNKNOWN: parse_style("magenta"),
}


def _first_match(rules: Sequence[_Rule], entry: EnrichedEntry) -> _Rule | None:
    for rule in rules:
        predicate: RulePredicate = rule.predicate
        if predicate.matches(entry.name, entry.ext, entry.file_type, entry.git_status):
            return rule
    return None


def type_style(entry: EnrichedEntry) -> Style:
    if entry.file_type is FileType.FILE:
        if entry.raw.mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH):
            return EXECUTABLE_STYLE
        return PLAIN_STYLE
    return TYPE_STYLES.get(entry.file_type, PLAIN_STYLE)


def resolve_style(entry: EnrichedEntry, spec: EffectiveSpec) -> Style:
    """Return the name style from ``spec.colors`` or the type default."""
    rule = _first_match(spec.colors, entry)
    if rule is not None:
        return rule.style
    return type_style(entry)


def resolve_icon_token(entry: EnrichedEntry, spec: EffectiveSpec) -> str | None:
    """Return the icon token from ``spec.icon_rules`` or the type default."""
    rule = _first_match(spec.icon_rules, entry)
    if rule is not None:
        return rule.icon
    return TYPE_ICONS.get(entry.file_type)


__all__ = [
    "BROKEN_SYMLINK_STYLE",
    "GIT_MARKERS",
    "GIT_STYLES",
    "TYPE_ICONS",
    "TYPE_STYLES",
    "resolve_icon_token",
    "resolve_style",
    "type_style",
]
