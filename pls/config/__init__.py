"""Configuration resolution: scoped fragments folded into an ``EffectiveSpec``.

This package contains:
- fragment/spec datatypes and precedence scopes
- document validation (unknown keys and ill-typed values reject a fragment)
- the built-in default fragment
- discovery of user, ancestor and local ``.pls.yml`` documents
- the last-write-wins fold with ``extend`` support for list options
"""

from __future__ import annotations

from .defaults import BUILTIN_CONFIG, builtin_fragment
from .parse import parse_fragment, parse_sort_key
from .resolve import Resolution, apply_fragment, merge_fragments, resolve
from .sources import LOCAL_CONFIG_FILENAME, collect_fragments, load_document
from .types import (
    ConfigFragment,
    EffectiveSpec,
    IconRule,
    ImportancePattern,
    RulePredicate,
    Scope,
    SortKey,
    StyleRule,
)

__all__ = [
    "BUILTIN_CONFIG",
    "builtin_fragment",
    "parse_fragment",
    "parse_sort_key",
    "Resolution",
    "apply_fragment",
    "merge_fragments",
    "resolve",
    "LOCAL_CONFIG_FILENAME",
    "collect_fragments",
    "load_document",
    "ConfigFragment",
    "EffectiveSpec",
    "IconRule",
    "ImportancePattern",
    "RulePredicate",
    "Scope",
    "SortKey",
    "StyleRule",
]
