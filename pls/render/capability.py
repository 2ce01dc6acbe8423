"""Output capability descriptor and the default terminal probe."""

from __future__ import annotations

import codecs
import os
import shutil
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import TextIO

from ..errors import RenderError

DEFAULT_COLUMNS = 80


class ColorDepth(IntEnum):
    NONE = 0
    BASIC = 1
    EIGHT_BIT = 2
    TRUECOLOR = 3


@dataclass(frozen=True)
class Capability:
    """What the output target can render, sampled once per invocation."""

    color_depth: ColorDepth
    columns: int
    unicode: bool
    interactive: bool

    def validated(self) -> "Capability":
        """Return ``self`` or raise ``RenderError`` when a field is unusable."""
        if not isinstance(self.color_depth, ColorDepth):
            raise RenderError(f"unknown color depth {self.color_depth!r}")
        if isinstance(self.columns, bool) or not isinstance(self.columns, int) or self.columns <= 0:
            raise RenderError(f"invalid column width {self.columns!r}")
        return self


PLAIN_CAPABILITY = Capability(color_depth=ColorDepth.NONE, columns=DEFAULT_COLUMNS, unicode=False, interactive=False)


def _color_depth_from_env(env: Mapping[str, str]) -> ColorDepth:
    if "NO_COLOR" in env:
        return ColorDepth.NONE
    term = env.get("TERM", "")
    if term == "dumb":
        return ColorDepth.NONE
    if env.get("COLORTERM", "").lower() in {"truecolor", "24bit"}:
        return ColorDepth.TRUECOLOR
    if "256color" in term:
        return ColorDepth.EIGHT_BIT
    return ColorDepth.BASIC


def _stream_supports_unicode(stream: TextIO) -> bool:
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        return codecs.lookup(encoding).name.startswith("utf")
    except LookupError:
        return False


def probe_capability(stream: TextIO | None = None, env: Mapping[str, str] | None = None) -> Capability:
    """Describe ``stream`` (stdout by default) from its tty state and environment."""
    stream = stream if stream is not None else sys.stdout
    env = env if env is not None else os.environ
    try:
        interactive = stream.isatty()
    except (AttributeError, ValueError):
        interactive = False

    columns = shutil.get_terminal_size((DEFAULT_COLUMNS, 24)).columns
    return Capability(
        color_depth=_color_depth_from_env(env) if interactive else ColorDepth.NONE,
        columns=max(1, columns),
        unicode=_stream_supports_unicode(stream),
        interactive=interactive,
    )


__all__ = ["Capability", "ColorDepth", "DEFAULT_COLUMNS", "PLAIN_CAPABILITY", "probe_capability"]
