"""Style directives for entry names and detail cells.

A style string is a space-separated list of directives, for example
``"bold rgb(247,76,0)"`` or ``"dimmed bright_blue"``. Parsing happens when a
configuration fragment is read, so a typo rejects that fragment instead of
surfacing mid-render.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

BASIC_COLOR_NAMES = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")

ATTRIBUTE_CODES = {
    "bold": 1,
    "dimmed": 2,
    "italic": 3,
    "underline": 4,
    "blink": 5,
    "reverse": 7,
    "hidden": 8,
    "strikethrough": 9,
}

_RGB_RE = re.compile(r"^rgb\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)$")
_HEX_RE = re.compile(r"^#([0-9a-fA-F]{6})$")
_INDEXED_RE = re.compile(r"^color\(\s*(\d{1,3})\s*\)$")


@dataclass(frozen=True)
class Color:
    """A foreground color at the fidelity it was written in.

    ``kind`` is ``"basic"`` (``value`` is one index 0-15, 8-15 being the bright
    variants), ``"indexed"`` (one xterm-256 index) or ``"rgb"`` (three
    channels).
    """

    kind: str
    value: tuple[int, ...]

    @classmethod
    def basic(cls, index: int) -> "Color":
        return cls("basic", (index,))

    @classmethod
    def indexed(cls, index: int) -> "Color":
        return cls("indexed", (index,))

    @classmethod
    def rgb(cls, red: int, green: int, blue: int) -> "Color":
        return cls("rgb", (red, green, blue))


@dataclass(frozen=True)
class Style:
    fg: Color | None = None
    attributes: frozenset[str] = frozenset()

    @property
    def is_plain(self) -> bool:
        return self.fg is None and not self.attributes

    def layered(self, other: "Style | None") -> "Style":
        """Return this style with ``other`` applied on top.

        A foreground in ``other`` replaces ours; attributes accumulate.
        """
        if other is None:
            return self
        return Style(
            fg=other.fg if other.fg is not None else self.fg,
            attributes=self.attributes | other.attributes,
        )


PLAIN_STYLE = Style()


def _parse_color(token: str) -> Color | None:
    lowered = token.lower()
    if lowered in BASIC_COLOR_NAMES:
        return Color.basic(BASIC_COLOR_NAMES.index(lowered))
    if lowered.startswith("bright_") and lowered[len("bright_"):] in BASIC_COLOR_NAMES:
        return Color.basic(8 + BASIC_COLOR_NAMES.index(lowered[len("bright_"):]))

    match = _RGB_RE.match(lowered)
    if match:
        channels = tuple(int(part) for part in match.groups())
        if any(channel > 255 for channel in channels):
            raise ValueError(f"color channel out of range in {token!r}")
        return Color.rgb(*channels)

    match = _HEX_RE.match(token)
    if match:
        digits = match.group(1)
        return Color.rgb(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    match = _INDEXED_RE.match(lowered)
    if match:
        index = int(match.group(1))
        if index > 255:
            raise ValueError(f"256-color index out of range in {token!r}")
        return Color.indexed(index)
    return None


def parse_style(text: str) -> Style:
    """Parse a directive string into a ``Style``.

    Raises ``ValueError`` naming the first directive that is not recognized.
    The last color directive wins; attributes accumulate.
    """
    if not isinstance(text, str):
        raise ValueError(f"style must be a string, not {type(text).__name__}")

    fg: Color | None = None
    attributes: set[str] = set()
    # ``rgb(1, 2, 3)`` may contain spaces, so squeeze them before splitting.
    normalized = re.sub(r"\(\s*([^)]*?)\s*\)", lambda m: "(" + m.group(1).replace(" ", "") + ")", text)
    for token in normalized.split():
        if token.lower() in ATTRIBUTE_CODES:
            attributes.add(token.lower())
            continue
        color = _parse_color(token)
        if color is None:
            raise ValueError(f"unknown style directive {token!r}")
        fg = color
    return Style(fg=fg, attributes=frozenset(attributes))


__all__ = [
    "ATTRIBUTE_CODES",
    "BASIC_COLOR_NAMES",
    "Color",
    "Style",
    "PLAIN_STYLE",
    "parse_style",
]
