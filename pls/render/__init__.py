"""Layout/render stage: ordered entries to terminal rows or plain lines."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..config import EffectiveSpec
from ..errors import RenderError
from ..ordering import OrderedEntry
from .capability import PLAIN_CAPABILITY, Capability, ColorDepth, probe_capability
from .color import paint, rgb_to_256, rgb_to_basic, sgr
from .icons import IconTheme, available_icon_themes, resolve_icon_theme
from .layout import Cell, Row, Span, fit_spans, format_mtime, human_size, layout_rows
from .plain import plain_line, plain_lines
from .rules import resolve_icon_token, resolve_style

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rendered:
    """Output of one render pass.

    ``rows`` is empty when the plain fallback was used; ``lines`` always
    holds the text to write.
    """

    rows: tuple[Row, ...]
    lines: tuple[str, ...]
    capability: Capability
    plain: bool


def render_listing(
    ordered: Sequence[OrderedEntry],
    spec: EffectiveSpec,
    capability: Capability | None,
) -> Rendered:
    """Render ``ordered`` for ``capability``.

    A missing or unusable descriptor falls back to plain output, as does a
    non-interactive target.
    """
    try:
        if capability is None:
            raise RenderError("no output capability descriptor")
        capability = capability.validated()
    except RenderError as exc:
        logger.warning("%s; writing plain output", exc)
        return Rendered(rows=(), lines=tuple(plain_lines(ordered)), capability=PLAIN_CAPABILITY, plain=True)

    if not capability.interactive:
        return Rendered(rows=(), lines=tuple(plain_lines(ordered)), capability=capability, plain=True)

    rows = layout_rows(ordered, spec, capability)
    lines = tuple(row.render(capability.color_depth) for row in rows)
    logger.debug("rendered %d rows at %s, %d columns", len(rows), capability.color_depth.name, capability.columns)
    return Rendered(rows=rows, lines=lines, capability=capability, plain=False)


__all__ = [
    "Capability",
    "Cell",
    "ColorDepth",
    "IconTheme",
    "PLAIN_CAPABILITY",
    "Rendered",
    "Row",
    "Span",
    "available_icon_themes",
    "fit_spans",
    "format_mtime",
    "human_size",
    "layout_rows",
    "paint",
    "plain_line",
    "plain_lines",
    "probe_capability",
    "render_listing",
    "resolve_icon_theme",
    "resolve_icon_token",
    "resolve_style",
    "rgb_to_256",
    "rgb_to_basic",
    "sgr",
]
