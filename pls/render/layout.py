"""Two-pass table layout for listing rows.

Pass one builds every cell at its natural width and measures each detail
column across all rows (header included). Pass two pads detail cells to
their column width and gives the name column whatever the terminal has left,
truncating it with an ellipsis when it does not fit.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime

from ..config import EffectiveSpec
from ..enums import DetailField
from ..metadata import EnrichedEntry, SymlinkState
from ..ordering import OrderedEntry
from ..styles import PLAIN_STYLE, Style, parse_style
from .ansi import ASCII_ELLIPSIS, UNICODE_ELLIPSIS, clip_to_width, display_width
from .capability import Capability, ColorDepth
from .color import paint
from .icons import IconTheme, resolve_icon_theme
from .rules import BROKEN_SYMLINK_STYLE, GIT_MARKERS, GIT_STYLES, resolve_icon_token, resolve_style

COLUMN_SEPARATOR = " "
MTIME_FORMAT = "%Y-%b-%d %I:%M%p"
SIZE_UNITS = ("KiB", "MiB", "GiB", "TiB", "PiB", "EiB")

HEADER_NAMES: dict[DetailField | None, str] = {
    DetailField.PERMISSIONS: "Permissions",
    DetailField.OWNER: "User",
    DetailField.GROUP: "Group",
    DetailField.SIZE: "Size",
    DetailField.MTIME: "Modified",
    DetailField.GIT: "Git",
    None: "Name",
}

HEADER_STYLE = parse_style("bold italic")
CHAIN_STYLE = parse_style("dimmed blue")
SIZE_STYLE = parse_style("green")
MTIME_STYLE = parse_style("yellow")
OWN_STYLE = parse_style("bold blue")
MEMBER_STYLE = parse_style("blue")
OTHER_STYLE = parse_style("dimmed")
LOW_IMPORTANCE_STYLE = parse_style("dimmed")

# Narrowest name column the detail columns may squeeze it to.
MIN_NAME_WIDTH = 8

_PERMISSION_STYLES = {
    "d": parse_style("blue"),
    "l": parse_style("cyan"),
    "r": parse_style("yellow"),
    "w": parse_style("red"),
    "x": parse_style("green"),
    "s": parse_style("green"),
    "t": parse_style("green"),
    "S": parse_style("red"),
    "T": parse_style("red"),
    "-": parse_style("dimmed"),
}

_RIGHT_ALIGNED = {DetailField.SIZE}


@dataclass(frozen=True)
class Span:
    text: str
    style: Style = PLAIN_STYLE

    @property
    def width(self) -> int:
        return display_width(self.text)


@dataclass(frozen=True)
class Cell:
    """Styled spans plus the width the cell is padded to.

    ``width`` of zero leaves the cell at its natural width.
    """

    spans: tuple[Span, ...]
    width: int = 0
    align: str = "left"

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)

    @property
    def natural_width(self) -> int:
        return sum(span.width for span in self.spans)

    def render(self, depth: ColorDepth) -> str:
        body = "".join(paint(span.text, span.style, depth) for span in self.spans)
        padding = " " * max(0, self.width - self.natural_width)
        if self.align == "right":
            return padding + body
        return body + padding


@dataclass(frozen=True)
class Row:
    cells: tuple[Cell, ...]
    entry: OrderedEntry | None = None

    @property
    def text(self) -> str:
        return self.render(ColorDepth.NONE)

    def render(self, depth: ColorDepth) -> str:
        return COLUMN_SEPARATOR.join(cell.render(depth) for cell in self.cells)


def human_size(size: int) -> str:
    """Format ``size`` in bytes with binary prefixes, e.g. ``1.5 KiB``."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in SIZE_UNITS:
        value /= 1024
        if value < 1024 or unit == SIZE_UNITS[-1]:
            return f"{value:.1f} {unit}"
    raise AssertionError("unreachable")


def format_mtime(mtime_ns: int) -> str:
    stamp = datetime.fromtimestamp(mtime_ns / 1_000_000_000).strftime(MTIME_FORMAT)
    return stamp[:-2] + stamp[-2:].lower()


@dataclass(frozen=True)
class _Identity:
    uid: int | None
    gids: frozenset[int]


def _current_identity() -> _Identity:
    getuid = getattr(os, "getuid", None)
    if getuid is None:
        return _Identity(uid=None, gids=frozenset())
    gids = {os.getgid()}
    try:
        gids.update(os.getgroups())
    except OSError:
        pass
    return _Identity(uid=getuid(), gids=frozenset(gids))


def _detail_cell(field: DetailField, entry: EnrichedEntry, identity: _Identity) -> Cell:
    align = "right" if field in _RIGHT_ALIGNED else "left"
    if field is DetailField.PERMISSIONS:
        spans = tuple(Span(ch, _PERMISSION_STYLES.get(ch, PLAIN_STYLE)) for ch in entry.permissions)
        return Cell(spans)
    if field is DetailField.OWNER:
        style = OWN_STYLE if entry.raw.uid == identity.uid else OTHER_STYLE
        return Cell((Span(entry.owner, style),))
    if field is DetailField.GROUP:
        style = MEMBER_STYLE if entry.raw.gid in identity.gids else OTHER_STYLE
        return Cell((Span(entry.group, style),))
    if field is DetailField.SIZE:
        if entry.is_dir:
            return Cell((Span("-", OTHER_STYLE),), align=align)
        return Cell((Span(human_size(entry.raw.size), SIZE_STYLE),), align=align)
    if field is DetailField.MTIME:
        return Cell((Span(format_mtime(entry.raw.mtime_ns), MTIME_STYLE),))
    marker = GIT_MARKERS.get(entry.git_status, "")
    return Cell((Span(marker, GIT_STYLES.get(entry.git_status, PLAIN_STYLE)),))


def _name_cell(item: OrderedEntry, spec: EffectiveSpec, theme: IconTheme, unicode: bool) -> Cell:
    shown = item.shown
    style = resolve_style(shown, spec)
    if item.importance is not None:
        importance_style = item.importance.style
        if importance_style is None and item.importance.level < 0:
            importance_style = LOW_IMPORTANCE_STYLE
        style = style.layered(importance_style)

    spans: list[Span] = []
    if theme.enabled:
        spans.append(Span(theme.glyph(resolve_icon_token(shown, spec)) + " ", style))
    if item.chain:
        spans.append(Span("/".join(item.chain[:-1]) + "/", CHAIN_STYLE))
    spans.append(Span(shown.name, style))
    if shown.file_type.suffix:
        spans.append(Span(shown.file_type.suffix, OTHER_STYLE))

    target = shown.raw.symlink_target
    if target is not None:
        arrow = " → " if unicode else " -> "
        target_style = PLAIN_STYLE
        # Only pay for the target stat when detail columns are shown.
        if spec.detail and shown.symlink_state is not SymlinkState.OK:
            target_style = BROKEN_SYMLINK_STYLE
        spans.append(Span(arrow, OTHER_STYLE))
        spans.append(Span(target, target_style))
    return Cell(tuple(spans))


def fit_spans(spans: Sequence[Span], max_cols: int, ellipsis: str) -> tuple[Span, ...]:
    """Trim ``spans`` to ``max_cols`` columns, ending any cut with ``ellipsis``."""
    spans = tuple(spans)
    if sum(span.width for span in spans) <= max_cols:
        return spans
    marker_width = display_width(ellipsis)
    if max_cols <= marker_width:
        return (Span(clip_to_width(ellipsis, max_cols)),)

    budget = max_cols - marker_width
    kept: list[Span] = []
    last_style = PLAIN_STYLE
    for span in spans:
        if budget <= 0:
            break
        text = clip_to_width(span.text, budget)
        if text:
            kept.append(Span(text, span.style))
            last_style = span.style
        budget -= span.width
    kept.append(Span(ellipsis, last_style))
    return tuple(kept)


def _fit_detail_widths(widths: Sequence[int], budget: int) -> list[int | None]:
    """Shrink detail columns, rightmost first, until they fit ``budget``.

    A column that cannot keep one character is dropped and comes back as
    ``None``. Each column's budget includes its trailing separator.
    """
    separator = display_width(COLUMN_SEPARATOR)
    fitted: list[int | None] = list(widths)
    total = sum(widths) + separator * len(widths)
    for column in reversed(range(len(widths))):
        overflow = total - budget
        if overflow <= 0:
            break
        width = widths[column]
        if width - overflow >= 1:
            fitted[column] = width - overflow
            total -= overflow
        else:
            fitted[column] = None
            total -= width + separator
    return fitted


def _header_row(spec: EffectiveSpec) -> Row:
    cells = [
        Cell((Span(HEADER_NAMES[field], HEADER_STYLE),), align="right" if field in _RIGHT_ALIGNED else "left")
        for field in spec.detail
    ]
    cells.append(Cell((Span(HEADER_NAMES[None], HEADER_STYLE),)))
    return Row(tuple(cells))


def layout_rows(ordered: Sequence[OrderedEntry], spec: EffectiveSpec, capability: Capability) -> tuple[Row, ...]:
    """Lay ``ordered`` out as rows that fit ``capability.columns``.

    The name column is truncated first. Once it is down to
    ``MIN_NAME_WIDTH`` the detail columns give way from the right.
    """
    theme = resolve_icon_theme(spec.icons, capability)
    ellipsis = UNICODE_ELLIPSIS if capability.unicode else ASCII_ELLIPSIS
    identity = _current_identity()

    rows: list[Row] = []
    if spec.header:
        rows.append(_header_row(spec))
    for item in ordered:
        cells = [_detail_cell(field, item.shown, identity) for field in spec.detail]
        cells.append(_name_cell(item, spec, theme, capability.unicode))
        rows.append(Row(tuple(cells), entry=item))

    widths = [0] * len(spec.detail)
    for row in rows:
        for column, cell in enumerate(row.cells[:-1]):
            widths[column] = max(widths[column], cell.natural_width)

    name_natural = max((row.cells[-1].natural_width for row in rows), default=0)
    name_floor = min(MIN_NAME_WIDTH, name_natural, capability.columns)
    fitted = _fit_detail_widths(widths, capability.columns - name_floor)
    separator = display_width(COLUMN_SEPARATOR)
    used = sum(width + separator for width in fitted if width is not None)
    name_width = max(1, capability.columns - used)

    laid_out: list[Row] = []
    for row in rows:
        cells = [
            replace(cell, spans=fit_spans(cell.spans, width, ellipsis), width=width)
            for cell, width in zip(row.cells[:-1], fitted)
            if width is not None
        ]
        name = row.cells[-1]
        cells.append(replace(name, spans=fit_spans(name.spans, name_width, ellipsis)))
        laid_out.append(replace(row, cells=tuple(cells)))
    return tuple(laid_out)


__all__ = [
    "COLUMN_SEPARATOR",
    "Cell",
    "HEADER_NAMES",
    "Row",
    "Span",
    "fit_spans",
    "format_mtime",
    "human_size",
    "layout_rows",
]
