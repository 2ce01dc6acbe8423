"""Display-width measurement and cell shaping for styled terminal text.

Widths count terminal cells, not code points: combining marks take none and
East Asian wide/fullwidth characters take two. Escape sequences take none.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
UNICODE_ELLIPSIS = "…"
ASCII_ELLIPSIS = "..."


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks and other zero-width format characters consume no
    columns, East Asian wide/fullwidth characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.category(ch) in {"Mn", "Me", "Cf"}:
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return the number of terminal cells ``text`` occupies."""
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def clip_to_width(text: str, max_cols: int) -> str:
    """Trim plain ``text`` to at most ``max_cols`` display columns.

    A wide character that would straddle the limit is dropped whole.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
    return "".join(out)


__all__ = [
    "ANSI_ESCAPE_RE",
    "ASCII_ELLIPSIS",
    "UNICODE_ELLIPSIS",
    "char_display_width",
    "clip_to_width",
    "display_width",
    "strip_ansi",
]
