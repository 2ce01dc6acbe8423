"""Color degradation and SGR escape generation.

Every style is rendered at one invocation-wide color depth. Colors written at
a higher fidelity than the terminal supports are mapped to the nearest color
the terminal has: truecolor to the xterm 256-color palette, anything to the
eight basic colors, or dropped entirely.
"""

from __future__ import annotations

from functools import lru_cache

from ..styles import ATTRIBUTE_CODES, Color, Style
from .capability import ColorDepth

RESET = "\033[0m"

_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)

# Standard xterm values for palette entries 0-15.
_SYSTEM_COLORS = (
    (0, 0, 0),
    (205, 0, 0),
    (0, 205, 0),
    (205, 205, 0),
    (0, 0, 238),
    (205, 0, 205),
    (0, 205, 205),
    (229, 229, 229),
    (127, 127, 127),
    (255, 0, 0),
    (0, 255, 0),
    (255, 255, 0),
    (92, 92, 255),
    (255, 0, 255),
    (0, 255, 255),
    (255, 255, 255),
)


def _distance(a: tuple[int, ...], b: tuple[int, ...]) -> int:
    return sum((x - y) * (x - y) for x, y in zip(a, b))


def palette_rgb(index: int) -> tuple[int, int, int]:
    """Return the RGB value of xterm palette entry ``index``."""
    if index < 16:
        return _SYSTEM_COLORS[index]
    if index < 232:
        offset = index - 16
        return (
            _CUBE_LEVELS[offset // 36],
            _CUBE_LEVELS[(offset // 6) % 6],
            _CUBE_LEVELS[offset % 6],
        )
    level = 8 + (index - 232) * 10
    return (level, level, level)


def _nearest_cube_level(channel: int) -> int:
    return min(range(len(_CUBE_LEVELS)), key=lambda i: (abs(_CUBE_LEVELS[i] - channel), i))


@lru_cache(maxsize=1024)
def rgb_to_256(red: int, green: int, blue: int) -> int:
    """Return the closest xterm-256 index among the color cube and gray ramp.

    Ties resolve to the lower index, so the mapping is a pure function of
    its input.
    """
    rgb = (red, green, blue)
    r, g, b = (_nearest_cube_level(channel) for channel in rgb)
    cube_index = 16 + 36 * r + 6 * g + b

    average = (red + green + blue) // 3
    gray_step = min(23, max(0, round((average - 8) / 10)))
    gray_index = 232 + gray_step

    candidates = sorted(
        (cube_index, gray_index),
        key=lambda index: (_distance(palette_rgb(index), rgb), index),
    )
    return candidates[0]


@lru_cache(maxsize=1024)
def rgb_to_basic(red: int, green: int, blue: int) -> int:
    """Return the closest of the eight basic colors (0-7)."""
    rgb = (red, green, blue)
    return min(range(8), key=lambda index: (_distance(_SYSTEM_COLORS[index], rgb), index))


def degrade_color(color: Color, depth: ColorDepth) -> Color | None:
    """Map ``color`` to what ``depth`` can display, or ``None`` for no color."""
    if depth is ColorDepth.NONE:
        return None
    if color.kind == "basic":
        if depth is ColorDepth.BASIC and color.value[0] >= 8:
            return Color.basic(color.value[0] - 8)
        return color
    if color.kind == "indexed":
        if depth >= ColorDepth.EIGHT_BIT:
            return color
        return Color.basic(rgb_to_basic(*palette_rgb(color.value[0])))
    # rgb
    if depth is ColorDepth.TRUECOLOR:
        return color
    if depth is ColorDepth.EIGHT_BIT:
        return Color.indexed(rgb_to_256(*color.value))
    return Color.basic(rgb_to_basic(*color.value))


def _color_params(color: Color) -> list[str]:
    if color.kind == "basic":
        index = color.value[0]
        return [str(30 + index)] if index < 8 else [str(90 + index - 8)]
    if color.kind == "indexed":
        return ["38", "5", str(color.value[0])]
    return ["38", "2", *(str(channel) for channel in color.value)]


def sgr(style: Style, depth: ColorDepth) -> str:
    """Return the escape sequence that turns ``style`` on at ``depth``.

    Returns an empty string at ``ColorDepth.NONE`` or for a plain style.
    """
    if depth is ColorDepth.NONE or style.is_plain:
        return ""
    params = [str(ATTRIBUTE_CODES[name]) for name in sorted(style.attributes, key=ATTRIBUTE_CODES.__getitem__)]
    if style.fg is not None:
        degraded = degrade_color(style.fg, depth)
        if degraded is not None:
            params.extend(_color_params(degraded))
    if not params:
        return ""
    return f"\033[{';'.join(params)}m"


def paint(text: str, style: Style, depth: ColorDepth) -> str:
    """Wrap ``text`` in ``style``'s escape sequence and a reset."""
    if not text:
        return text
    prefix = sgr(style, depth)
    if not prefix:
        return text
    return f"{prefix}{text}{RESET}"


__all__ = [
    "RESET",
    "degrade_color",
    "paint",
    "palette_rgb",
    "rgb_to_256",
    "rgb_to_basic",
    "sgr",
]
