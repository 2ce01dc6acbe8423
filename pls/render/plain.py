"""Tab-separated output for pipes and scripts.

One line per entry: name, size in bytes, modification time (ISO 8601,
seconds) and git status, with no escapes, icons or padding.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from ..ordering import OrderedEntry

PLAIN_FIELD_SEPARATOR = "\t"


def plain_line(item: OrderedEntry) -> str:
    shown = item.shown
    mtime = datetime.fromtimestamp(shown.raw.mtime_ns // 1_000_000_000).isoformat(timespec="seconds")
    fields = (item.label, str(shown.raw.size), mtime, shown.git_status.value)
    return PLAIN_FIELD_SEPARATOR.join(fields)


def plain_lines(ordered: Sequence[OrderedEntry]) -> list[str]:
    return [plain_line(item) for item in ordered]


__all__ = ["PLAIN_FIELD_SEPARATOR", "plain_line", "plain_lines"]
