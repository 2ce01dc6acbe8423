"""Validate raw configuration documents into ``ConfigFragment`` values.

Parsing is all-or-nothing per fragment: an unknown key or a single ill-typed
value raises ``ConfigError`` and nothing from that document is applied.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from ..enums import DetailField, FileType, GitStatus, IconSet
from ..errors import ConfigError
from ..patterns import NamePattern
from ..styles import Style, parse_style
from .types import (
    LIST_OPTIONS,
    ConfigFragment,
    IconRule,
    ImportancePattern,
    RulePredicate,
    Scope,
    SortKey,
    StyleRule,
)

EXTEND_MARKER = "extend"

SORT_FIELDS = ("cat", "name", "cname", "size", "mtime", "type", "extension")
_SORT_ALIASES = {"ext": "extension", "typ": "type"}
_RULE_KEYS = frozenset({"match", "ext", "type", "git"})


def _expect_bool(value: object) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"expected a boolean, got {type(value).__name__}")
    return value


def _expect_int(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an integer, got {type(value).__name__}")
    return value


def _expect_str(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("expected a non-empty string")
    return value.strip()


def _expect_list(value: object) -> list[object]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ValueError(f"expected a list, got {type(value).__name__}")
    return value


def _parse_pattern(value: object) -> NamePattern:
    return NamePattern.parse(_expect_str(value))


def _parse_optional_pattern(value: object) -> NamePattern | None:
    if value is None:
        return None
    return _parse_pattern(value)


def _parse_detail(value: object) -> tuple[DetailField, ...]:
    fields: list[DetailField] = []
    for item in _expect_list(value):
        try:
            detail = DetailField(_expect_str(item).lower())
        except ValueError:
            choices = ", ".join(field.value for field in DetailField)
            raise ValueError(f"unknown detail column {item!r} (choose from {choices})") from None
        if detail not in fields:
            fields.append(detail)
    return tuple(fields)


def _parse_icons(value: object) -> str:
    name = _expect_str(value).lower()
    try:
        return IconSet(name).value
    except ValueError:
        choices = ", ".join(icon_set.value for icon_set in IconSet)
        raise ValueError(f"unknown icon theme {value!r} (choose from {choices})") from None


def parse_sort_key(text: str) -> SortKey:
    """Parse sort-key tokens.

    ``name`` sorts ascending; ``-name`` and ``name_`` both sort descending.
    """
    token = _expect_str(text).lower()
    descending = False
    if token.startswith("-"):
        descending, token = True, token[1:]
    elif token.endswith("_"):
        descending, token = True, token[:-1]
    token = _SORT_ALIASES.get(token, token)
    if token not in SORT_FIELDS:
        raise ValueError(f"unknown sort key {text!r} (choose from {', '.join(SORT_FIELDS)})")
    return SortKey(field=token, descending=descending)


def _parse_sort(value: object) -> tuple[SortKey, ...]:
    """Parse the sort sequence.

    ``none`` discards every key listed before it. A key repeated later (in
    either direction) is dropped so the first occurrence decides.
    """
    keys: list[SortKey] = []
    for item in _expect_list(value):
        if isinstance(item, str) and item.strip().lower() == "none":
            keys.clear()
            continue
        key = parse_sort_key(item)
        if any(existing.field == key.field for existing in keys):
            continue
        keys.append(key)
    return tuple(keys)


def _parse_types(value: object) -> frozenset[FileType]:
    types: set[FileType] = set()
    for item in _expect_list(value):
        try:
            types.add(FileType(_expect_str(item).lower()))
        except ValueError:
            choices = ", ".join(file_type.value for file_type in FileType)
            raise ValueError(f"unknown file type {item!r} (choose from {choices})") from None
    if not types:
        raise ValueError("expected at least one file type")
    return frozenset(types)


def _parse_style_value(value: object) -> Style:
    return parse_style(_expect_str(value))


def _parse_predicate(raw: Mapping[str, object]) -> RulePredicate:
    pattern = _parse_pattern(raw["match"]) if "match" in raw else None
    ext = _expect_str(raw["ext"]).lstrip(".").lower() if "ext" in raw else None
    file_type = None
    if "type" in raw:
        try:
            file_type = FileType(_expect_str(raw["type"]).lower())
        except ValueError:
            raise ValueError(f"unknown file type {raw['type']!r}") from None
    git = None
    if "git" in raw:
        try:
            git = GitStatus(_expect_str(raw["git"]).lower())
        except ValueError:
            raise ValueError(f"unknown git status {raw['git']!r}") from None
    return RulePredicate(pattern=pattern, ext=ext, file_type=file_type, git=git)


def _parse_rule_table(value: object, result_key: str) -> list[tuple[RulePredicate, object]]:
    """Parse a rule table given either as ``{pattern: result}`` or a rule list."""
    if isinstance(value, Mapping):
        return [(RulePredicate(pattern=_parse_pattern(pattern)), result) for pattern, result in value.items()]

    rules: list[tuple[RulePredicate, object]] = []
    for item in _expect_list(value):
        if not isinstance(item, Mapping):
            raise ValueError(f"rule must be a mapping, got {type(item).__name__}")
        unknown = set(item) - _RULE_KEYS - {result_key}
        if unknown:
            raise ValueError(f"unknown rule field(s): {', '.join(sorted(map(str, unknown)))}")
        if result_key not in item:
            raise ValueError(f"rule is missing `{result_key}`")
        rules.append((_parse_predicate(item), item[result_key]))
    return rules


def _parse_colors(value: object) -> tuple[StyleRule, ...]:
    return tuple(
        StyleRule(predicate=predicate, style=_parse_style_value(style))
        for predicate, style in _parse_rule_table(value, "style")
    )


def _parse_icon_rules(value: object) -> tuple[IconRule, ...]:
    return tuple(
        IconRule(predicate=predicate, icon=_expect_str(icon))
        for predicate, icon in _parse_rule_table(value, "icon")
    )


def _parse_importance(value: object) -> tuple[ImportancePattern, ...]:
    patterns: list[ImportancePattern] = []
    for item in _expect_list(value):
        if isinstance(item, Mapping):
            unknown = set(item) - {"match", "style", "level"}
            if unknown or "match" not in item:
                raise ValueError("importance entries take `match` and optional `style` and `level`")
            style = _parse_style_value(item["style"]) if "style" in item else None
            level = _expect_int(item["level"]) if "level" in item else 1
            patterns.append(ImportancePattern(pattern=_parse_pattern(item["match"]), style=style, level=level))
            continue
        patterns.append(ImportancePattern(pattern=_parse_pattern(item)))
    return tuple(patterns)


OPTION_PARSERS: dict[str, Callable[[object], object]] = {
    "icons": _parse_icons,
    "colors": _parse_colors,
    "detail": _parse_detail,
    "sort": _parse_sort,
    "importance": _parse_importance,
    "collapse": _expect_bool,
    "icon_rules": _parse_icon_rules,
    "hidden": _expect_bool,
    "only": _parse_optional_pattern,
    "exclude": _parse_optional_pattern,
    "header": _expect_bool,
    "min_importance": _expect_int,
    "types": _parse_types,
}


def _split_extend(key: str, value: object) -> tuple[object, bool]:
    """Unwrap ``{extend: [...]}`` for list options."""
    if key in LIST_OPTIONS and isinstance(value, Mapping) and set(value) == {EXTEND_MARKER}:
        return value[EXTEND_MARKER], True
    return value, False


def parse_fragment(data: object, scope: Scope, origin: str) -> ConfigFragment:
    """Validate one raw document.

    ``data`` is what the YAML loader produced (``None`` for an empty file) or
    a mapping built by the CLI. Raises ``ConfigError`` naming ``origin``.
    """
    if data is None:
        return ConfigFragment(scope=scope, origin=origin)
    if not isinstance(data, Mapping):
        raise ConfigError(origin, f"expected a mapping at the top level, got {type(data).__name__}")

    values: dict[str, object] = {}
    extends: set[str] = set()
    for key, raw_value in data.items():
        parser = OPTION_PARSERS.get(key) if isinstance(key, str) else None
        if parser is None:
            raise ConfigError(origin, "unknown option", key=str(key))
        value, extend = _split_extend(key, raw_value)
        try:
            values[key] = parser(value)
        except ValueError as exc:
            raise ConfigError(origin, str(exc), key=key) from exc
        if extend:
            extends.add(key)
    return ConfigFragment(scope=scope, origin=origin, values=values, extends=frozenset(extends))


__all__ = ["EXTEND_MARKER", "OPTION_PARSERS", "SORT_FIELDS", "parse_fragment", "parse_sort_key"]
