"""Command-line front door for pls.

Turns CLI options into the highest-precedence configuration fragment,
probes the terminal once and runs the listing pipeline. Rows go to stdout;
diagnostics and the dropped-entry summary go to stderr.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import replace
from pathlib import Path

from .enums import DetailField, FileType
from .errors import EnumerationError
from .pipeline import drop_summary, list_directory, render_lines
from .render import ColorDepth, available_icon_themes, probe_capability

LOG_FORMAT = "pls: %(levelname)s: %(message)s"
LOG_ENV_VAR = "PLS_LOG"
_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _comma_list(value: str) -> list[str]:
    """argparse type for ``a,b`` lists; repeated flags accumulate."""
    items = [item.strip() for item in value.split(",") if item.strip()]
    if not items:
        raise argparse.ArgumentTypeError(f"expected a comma-separated list: {value!r}")
    return items


def _log_level(verbosity: int, env: Mapping[str, str]) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return _LOG_LEVELS.get(env.get(LOG_ENV_VAR, "").strip().lower(), logging.WARNING)


def configure_logging(verbosity: int = 0) -> None:
    """Send ``pls`` log records to stderr at the level the user asked for."""
    package_logger = logging.getLogger("pls")
    for handler in list(package_logger.handlers):
        if getattr(handler, "pls_cli", False):
            package_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.pls_cli = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    package_logger.setLevel(_log_level(verbosity, os.environ))
    package_logger.propagate = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pls",
        description="List a directory with colors, icons, git status and detail columns.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to list. Defaults to current directory.")
    parser.add_argument(
        "-d",
        "--detail",
        type=_comma_list,
        action="append",
        metavar="COLUMN",
        help=f"Detail columns to show ({', '.join(field.value for field in DetailField)}); repeatable.",
    )
    parser.add_argument(
        "-s",
        "--sort",
        type=_comma_list,
        action="append",
        metavar="KEY",
        help="Sort keys, 'key_' (or --sort=-key) for descending, 'none' to clear earlier keys; repeatable.",
    )
    collapse = parser.add_mutually_exclusive_group()
    collapse.add_argument("--collapse", dest="collapse", action="store_true", default=None, help="Collapse single-child directory chains.")
    collapse.add_argument("--no-collapse", dest="collapse", action="store_false", help="Never collapse directory chains.")
    parser.add_argument(
        "-i",
        "--icons",
        metavar="THEME",
        default=None,
        help=f"Icon theme ({', '.join(available_icon_themes())}).",
    )
    parser.add_argument("-a", "--all", dest="hidden", action="store_true", default=None, help="Show dot-entries.")
    parser.add_argument("--only", metavar="PATTERN", default=None, help="Only list names matching PATTERN (glob, or re:REGEX).")
    parser.add_argument("--exclude", metavar="PATTERN", default=None, help="Hide names matching PATTERN (glob, or re:REGEX).")
    parser.add_argument(
        "-t",
        "--type",
        dest="types",
        type=_comma_list,
        action="append",
        metavar="TYPE",
        help=f"Only list entries of these types ({', '.join(file_type.value for file_type in FileType)}); repeatable.",
    )
    parser.add_argument(
        "--imp",
        dest="min_importance",
        type=int,
        metavar="LEVEL",
        default=None,
        help="Hide entries whose importance level is below LEVEL.",
    )
    parser.add_argument("--header", action="store_true", default=None, help="Print a header row naming each column.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--plain", action="store_true", help="Print tab-separated lines instead of a table.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log more; repeat for debug output.")
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict[str, object]:
    """Return the command-line configuration fragment for ``args``.

    Only options the user actually gave appear, so everything else keeps the
    value from lower-precedence configuration.
    """
    overrides: dict[str, object] = {}
    if args.detail is not None:
        overrides["detail"] = [item for group in args.detail for item in group]
    if args.sort is not None:
        overrides["sort"] = [item for group in args.sort for item in group]
    if args.types is not None:
        overrides["types"] = [item for group in args.types for item in group]
    for key in ("collapse", "icons", "hidden", "only", "exclude", "header", "min_importance"):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value
    return overrides


def main(argv: Sequence[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and list the requested directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    capability = probe_capability()
    if args.no_color:
        capability = replace(capability, color_depth=ColorDepth.NONE)
    if args.plain:
        capability = replace(capability, interactive=False)

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path) if args.path is not None else default_path

    try:
        result = list_directory(path, overrides_from_args(args), capability)
    except EnumerationError as exc:
        raise SystemExit(f"pls: {exc}") from None

    lines = render_lines(result)
    if lines:
        sys.stdout.write("\n".join(lines) + "\n")
        sys.stdout.flush()
    summary = drop_summary(result)
    if summary is not None:
        sys.stderr.write(f"pls: {summary}\n")


if __name__ == "__main__":
    main()
