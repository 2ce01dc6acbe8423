"""CLI argument, output and exit-status behavior tests.

Verifies how ``pls.cli.main`` turns options into configuration overrides,
where it writes rows and diagnostics, and how it fails on bad targets.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

from pls import cli


def _isolated_user_config(root: Path):
    return mock.patch("pls.config.sources.USER_CONFIG_PATH", root / "no-user-config.yml")


def _reset_package_logger() -> None:
    logger = logging.getLogger("pls")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class OverridesTests(unittest.TestCase):
    def test_only_given_options_become_overrides(self) -> None:
        args = cli.build_parser().parse_args([])
        self.assertEqual(cli.overrides_from_args(args), {})

    def test_repeated_and_comma_separated_lists_accumulate(self) -> None:
        args = cli.build_parser().parse_args(["-d", "size,git", "-d", "owner", "-s", "cat", "--sort=-mtime", "-s", "size_"])
        self.assertEqual(
            cli.overrides_from_args(args),
            {"detail": ["size", "git", "owner"], "sort": ["cat", "-mtime", "size_"]},
        )

    def test_type_filter_and_importance_threshold(self) -> None:
        args = cli.build_parser().parse_args(["-t", "dir,symlink", "--type", "file", "--imp", "-2"])
        self.assertEqual(
            cli.overrides_from_args(args),
            {"types": ["dir", "symlink", "file"], "min_importance": -2},
        )

    def test_dash_prefixed_sort_key_needs_equals_form(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.build_parser().parse_args(["-s", "-mtime"])

    def test_toggles_and_filters(self) -> None:
        args = cli.build_parser().parse_args(
            ["--no-collapse", "-a", "--header", "-i", "unicode", "--only", "*.py", "--exclude", "re:^test_"]
        )
        self.assertEqual(
            cli.overrides_from_args(args),
            {
                "collapse": False,
                "hidden": True,
                "header": True,
                "icons": "unicode",
                "only": "*.py",
                "exclude": "re:^test_",
            },
        )

    def test_collapse_flags_are_mutually_exclusive(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.build_parser().parse_args(["--collapse", "--no-collapse"])


class MainTests(unittest.TestCase):
    def tearDown(self) -> None:
        _reset_package_logger()

    def test_plain_listing_of_default_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "b.txt").write_text("bb", encoding="utf-8")
            (root / "a.txt").write_text("a", encoding="utf-8")
            (root / "docs").mkdir()

            stdout = io.StringIO()
            with _isolated_user_config(root), mock.patch("sys.stdout", stdout):
                cli.main(["--plain"], default_path=root)

        lines = stdout.getvalue().splitlines()
        self.assertEqual([line.split("\t")[0] for line in lines], ["docs", "a.txt", "b.txt"])
        self.assertEqual(lines[1].split("\t")[1], "1")

    def test_explicit_path_argument_wins_over_default(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            target = root / "target"
            target.mkdir()
            (target / "inside.txt").write_text("", encoding="utf-8")

            stdout = io.StringIO()
            with _isolated_user_config(root), mock.patch("sys.stdout", stdout):
                cli.main([str(target), "--plain"], default_path=root / "unused")

        self.assertTrue(stdout.getvalue().startswith("inside.txt\t"))

    def test_missing_path_exits_with_diagnostic_and_no_output(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            missing = root / "missing"

            stdout = io.StringIO()
            with _isolated_user_config(root), mock.patch("sys.stdout", stdout):
                with self.assertRaises(SystemExit) as exc_info:
                    cli.main([str(missing)])

        self.assertEqual(str(exc_info.exception.code), f"pls: {missing}: not found")
        self.assertEqual(stdout.getvalue(), "")

    def test_drop_summary_goes_to_stderr_after_rows(self) -> None:
        result = SimpleNamespace(lines=("kept.txt",), dropped=2)
        stdout = io.StringIO()
        stderr = io.StringIO()
        with (
            mock.patch("pls.cli.list_directory", return_value=result),
            mock.patch("sys.stdout", stdout),
            mock.patch("sys.stderr", stderr),
        ):
            cli.main(["--plain"], default_path=Path.cwd())

        self.assertEqual(stdout.getvalue(), "kept.txt\n")
        self.assertIn("pls: 2 entries could not be read", stderr.getvalue())

    def test_no_color_and_plain_adjust_capability(self) -> None:
        result = SimpleNamespace(lines=(), dropped=0)
        with mock.patch("pls.cli.list_directory", return_value=result) as list_directory:
            cli.main(["--no-color", "--plain", "-s", "size"], default_path=Path.cwd())

        _path, overrides, capability = list_directory.call_args.args
        self.assertEqual(overrides, {"sort": ["size"]})
        self.assertEqual(capability.color_depth, cli.ColorDepth.NONE)
        self.assertFalse(capability.interactive)


class LoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        _reset_package_logger()

    def tearDown(self) -> None:
        _reset_package_logger()

    def test_verbosity_flags_raise_log_level(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop(cli.LOG_ENV_VAR, None)
            cli.configure_logging(0)
            self.assertEqual(logging.getLogger("pls").level, logging.WARNING)
            cli.configure_logging(1)
            self.assertEqual(logging.getLogger("pls").level, logging.INFO)
            cli.configure_logging(2)
            self.assertEqual(logging.getLogger("pls").level, logging.DEBUG)

    def test_environment_selects_level_and_handler_is_not_duplicated(self) -> None:
        with mock.patch.dict(os.environ, {cli.LOG_ENV_VAR: "error"}):
            cli.configure_logging()
            cli.configure_logging()
        logger = logging.getLogger("pls")
        self.assertEqual(logger.level, logging.ERROR)
        self.assertEqual(len([handler for handler in logger.handlers if getattr(handler, "pls_cli", False)]), 1)

    def test_records_use_prefixed_format(self) -> None:
        stderr = io.StringIO()
        with mock.patch("sys.stderr", stderr):
            cli.configure_logging(0)
        logging.getLogger("pls.config.resolve").warning("ignoring configuration %s", "x")
        self.assertEqual(stderr.getvalue(), "pls: WARNING: ignoring configuration x\n")


if __name__ == "__main__":
    unittest.main()
