"""Icon themes: glyph tables keyed by icon token.

The ordering and rule stages only pick a token such as ``"dir"`` or
``"rust"``; a theme turns it into something printable. Tokens a theme does
not know render as blank space so names stay aligned.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..enums import IconSet
from .ansi import display_width
from .capability import Capability

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IconTheme:
    name: str
    glyphs: Mapping[str, str] = field(default_factory=dict)
    cell_width: int = 1

    def glyph(self, token: str | None) -> str:
        """Return the glyph for ``token`` padded to the theme's cell width."""
        if not self.cell_width:
            return ""
        glyph = self.glyphs.get(token, "") if token is not None else ""
        return glyph + " " * max(0, self.cell_width - display_width(glyph))

    @property
    def enabled(self) -> bool:
        return self.cell_width > 0


NERD_THEME = IconTheme(
    name=IconSet.NERD.value,
    glyphs=MappingProxyType(
        {
            "pls": "\uf444",
            "missing": "\uea87",
            "dir": "\uf07b",
            "symlink": "\U000f0339",
            "fifo": "\U000f07e5",
            "socket": "\U000f07e8",
            "char_device": "\uf1dd",
            "block_device": "\U000f02ca",
            "audio": "\U000f04c3",
            "book": "\uf02d",
            "broom": "\U000f00e2",
            "config": "\ue615",
            "container": "\uf4b7",
            "env": "\ue22f",
            "image": "\U000f02e9",
            "json": "\ue60b",
            "law": "\uf495",
            "lock": "\uf456",
            "package": "\uf487",
            "python": "\ue606",
            "runner": "\U000f070e",
            "shell": "\uf489",
            "source": "\uf40d",
            "test": "\U000f0668",
            "text": "\ue612",
            "video": "\U000f0567",
            "apple": "\uf179",
            "git": "\U000f02a2",
            "github": "\uf408",
            "markdown": "\uf48a",
            "rust": "\ue68b",
        }
    ),
)

UNICODE_THEME = IconTheme(
    name=IconSet.UNICODE.value,
    glyphs=MappingProxyType(
        {
            "dir": "▸",
            "symlink": "↪",
            "fifo": "¦",
            "socket": "≡",
            "char_device": "¶",
            "block_device": "▤",
            "book": "☰",
            "law": "§",
            "lock": "⚿",
            "git": "±",
            "github": "±",
            "image": "▣",
            "audio": "♪",
            "video": "▶",
            "shell": "$",
            "runner": "»",
            "test": "✓",
            "source": "◆",
            "pls": "•",
        }
    ),
)

NO_ICONS = IconTheme(name=IconSet.NONE.value, cell_width=0)

_THEMES: dict[str, IconTheme] = {
    NERD_THEME.name: NERD_THEME,
    UNICODE_THEME.name: UNICODE_THEME,
    NO_ICONS.name: NO_ICONS,
}


def available_icon_themes() -> tuple[str, ...]:
    return tuple(sorted(_THEMES))


def resolve_icon_theme(name: str, capability: Capability) -> IconTheme:
    """Return the theme to draw with for ``name`` under ``capability``.

    Without Unicode output every theme collapses to no icons. Unknown theme
    names fall back to no icons with a warning.
    """
    if not capability.unicode:
        return NO_ICONS
    theme = _THEMES.get(name.strip().lower())
    if theme is None:
        logger.warning("unknown icon theme %r; drawing no icons", name)
        return NO_ICONS
    return theme


__all__ = [
    "IconTheme",
    "NERD_THEME",
    "NO_ICONS",
    "UNICODE_THEME",
    "available_icon_themes",
    "resolve_icon_theme",
]
