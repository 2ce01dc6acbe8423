"""Name patterns used by filters, importance rules and style/icon tables.

A pattern is a shell glob matched case-sensitively against an entry's name.
Prefixing it with ``re:`` turns the remainder into a regular expression that
is searched anywhere in the name.
"""

from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass, field

REGEX_PREFIX = "re:"


@dataclass(frozen=True)
class NamePattern:
    source: str
    _compiled: re.Pattern[str] = field(compare=False, repr=False)
    _anchored: bool = field(compare=False, repr=False)

    @classmethod
    def parse(cls, source: str) -> "NamePattern":
        """Compile ``source``; raises ``ValueError`` for an invalid regex."""
        if source.startswith(REGEX_PREFIX):
            try:
                compiled = re.compile(source[len(REGEX_PREFIX):])
            except (re.error, OverflowError, RecursionError) as exc:
                raise ValueError(f"invalid regular expression {source!r}: {exc}") from exc
            return cls(source=source, _compiled=compiled, _anchored=False)
        return cls(source=source, _compiled=re.compile(fnmatch.translate(source)), _anchored=True)

    def matches(self, name: str) -> bool:
        if self._anchored:
            return self._compiled.match(name) is not None
        return self._compiled.search(name) is not None

    def __str__(self) -> str:
        return self.source


__all__ = ["NamePattern", "REGEX_PREFIX"]
