"""Locate and load the configuration documents that apply to a directory.

Documents are read in precedence order: built-in defaults, the user-level
file, every ``.pls.yml`` from the filesystem root down to the target's
parent, the target's own ``.pls.yml``, then command-line overrides.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import yaml
from platformdirs import user_config_dir

from ..errors import ConfigError
from .defaults import builtin_fragment
from .parse import parse_fragment
from .types import ConfigFragment, Scope

APP_NAME = "pls"
CONFIG_FILENAME = "config.yml"
LOCAL_CONFIG_FILENAME = ".pls.yml"
CLI_ORIGIN = "<command line>"
DEFAULT_USER_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LEGACY_USER_CONFIG_PATH = Path.home() / LOCAL_CONFIG_FILENAME
USER_CONFIG_PATH = DEFAULT_USER_CONFIG_PATH


def user_config_path() -> Path:
    """Return the preferred user config path, falling back to the legacy home file."""
    if USER_CONFIG_PATH.exists():
        return USER_CONFIG_PATH
    if USER_CONFIG_PATH == DEFAULT_USER_CONFIG_PATH and LEGACY_USER_CONFIG_PATH.exists():
        return LEGACY_USER_CONFIG_PATH
    return USER_CONFIG_PATH


def load_document(path: Path, scope: Scope) -> ConfigFragment | ConfigError | None:
    """Read and validate one YAML document.

    Returns ``None`` when the file does not exist and a ``ConfigError`` when
    it exists but cannot be read, decoded or validated.
    """
    origin = str(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (FileNotFoundError, NotADirectoryError):
        return None
    except (OSError, UnicodeDecodeError) as exc:
        return ConfigError(origin, f"cannot read file: {exc}")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        return ConfigError(origin, f"invalid YAML: {exc}")

    try:
        return parse_fragment(data, scope, origin)
    except ConfigError as exc:
        return exc


def ancestor_config_paths(directory: Path) -> list[Path]:
    """Return ``.pls.yml`` candidates from the filesystem root to ``directory``'s parent."""
    return [parent / LOCAL_CONFIG_FILENAME for parent in reversed(directory.parents)]


def collect_fragments(
    directory: Path,
    overrides: Mapping[str, object] | None = None,
    *,
    include_user: bool = True,
) -> list[ConfigFragment | ConfigError]:
    """Gather every fragment for ``directory``, lowest precedence first.

    Missing files are skipped silently. Invalid ones appear in the result as
    ``ConfigError`` values so the resolver can log and skip them.
    """
    candidates: list[ConfigFragment | ConfigError] = [builtin_fragment()]
    seen: set[Path] = set()

    if include_user:
        user_path = user_config_path()
        seen.add(user_path)
        loaded = load_document(user_path, Scope.USER)
        if loaded is not None:
            candidates.append(loaded)

    for path in ancestor_config_paths(directory):
        if path in seen:
            continue
        seen.add(path)
        loaded = load_document(path, Scope.ANCESTOR)
        if loaded is not None:
            candidates.append(loaded)

    local_path = directory / LOCAL_CONFIG_FILENAME
    if local_path not in seen:
        loaded = load_document(local_path, Scope.LOCAL)
        if loaded is not None:
            candidates.append(loaded)

    if overrides:
        try:
            candidates.append(parse_fragment(dict(overrides), Scope.CLI, CLI_ORIGIN))
        except ConfigError as exc:
            candidates.append(exc)
    return candidates


__all__ = [
    "APP_NAME",
    "CLI_ORIGIN",
    "CONFIG_FILENAME",
    "DEFAULT_USER_CONFIG_PATH",
    "LEGACY_USER_CONFIG_PATH",
    "LOCAL_CONFIG_FILENAME",
    "USER_CONFIG_PATH",
    "ancestor_config_paths",
    "collect_fragments",
    "load_document",
    "user_config_path",
]
