"""Built-in configuration, parsed through the same path as user documents.

Rules are listed in ascending order of generality only where it matters:
style and icon tables are first-match-wins, so exact names precede
extension rules.
"""

from __future__ import annotations

from .parse import parse_fragment
from .types import ConfigFragment, Scope

BUILTIN_ORIGIN = "<built-in>"

BUILTIN_CONFIG: dict[str, object] = {
    "icons": "nerd",
    "detail": [],
    "sort": ["cat", "cname"],
    "collapse": False,
    "hidden": False,
    "header": False,
    "min_importance": -1,
    "importance": [
        {"match": "README*", "style": "underline", "level": 2},
        {"match": "src", "style": "bold", "level": 1},
        {"match": ".DS_Store", "level": -2},
        {"match": ".git", "level": -2},
        {"match": "re:\\.lock$", "level": -1},
    ],
    "icon_rules": [
        {"match": ".pls.yml", "icon": "pls"},
        {"match": ".git", "icon": "git"},
        {"match": ".gitignore", "icon": "git"},
        {"match": ".github", "icon": "github"},
        {"match": ".DS_Store", "icon": "apple"},
        {"match": ".env*", "icon": "env"},
        {"match": "README*", "icon": "book"},
        {"match": "LICENSE*", "icon": "law"},
        {"match": "Dockerfile*", "icon": "container"},
        {"match": "docker-compose*.yml", "icon": "container"},
        {"match": "src", "type": "dir", "icon": "source"},
        {"match": "test*", "type": "dir", "icon": "test"},
        {"match": "re:^(justfile|Makefile)$", "icon": "runner"},
        {"match": "pyproject.toml", "icon": "package"},
        {"match": "re:\\.lock$", "icon": "lock"},
        {"ext": "sh", "icon": "shell"},
        {"ext": "py", "icon": "python"},
        {"ext": "rs", "icon": "rust"},
        {"match": "re:\\.(txt|rtf)$", "icon": "text"},
        {"match": "re:\\.mdx?$", "icon": "markdown"},
        {"ext": "ini", "icon": "config"},
        {"match": "re:\\.(json|toml|yml|yaml)$", "icon": "json"},
        {"match": "re:\\.(jpg|jpeg|png|svg|webp|gif|ico)$", "icon": "image"},
        {"match": "re:\\.(mov|mp4|mkv|webm|avi|flv)$", "icon": "video"},
        {"match": "re:\\.(mp3|flac|ogg|wav)$", "icon": "audio"},
    ],
    "colors": [
        {"git": "conflicted", "style": "red bold"},
        {"match": ".DS_Store", "style": "dimmed"},
        {"ext": "rs", "style": "rgb(247,76,0)"},
        {"ext": "py", "style": "rgb(255,212,59)"},
        {"match": "re:\\.(jpg|jpeg|png|svg|webp|gif|ico)$", "style": "magenta"},
        {"match": "re:\\.(zip|tar|gz|xz|bz2|7z)$", "style": "red"},
    ],
}


def builtin_fragment() -> ConfigFragment:
    return parse_fragment(BUILTIN_CONFIG, Scope.BUILTIN, BUILTIN_ORIGIN)


__all__ = ["BUILTIN_CONFIG", "BUILTIN_ORIGIN", "builtin_fragment"]
