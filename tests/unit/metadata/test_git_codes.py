"""Tests for porcelain record parsing and per-entry status attribution."""

from __future__ import annotations

import unittest

from pls.enums import GitStatus
from pls.metadata import attribute_codes, decode_status_code, most_significant
from pls.metadata.git import _iter_porcelain_records


class DecodeStatusCodeTests(unittest.TestCase):
    def test_known_codes(self) -> None:
        cases = {
            "??": GitStatus.UNTRACKED,
            "!!": GitStatus.IGNORED,
            "UU": GitStatus.CONFLICTED,
            "AA": GitStatus.CONFLICTED,
            " M": GitStatus.MODIFIED,
            "MM": GitStatus.MODIFIED,
            "M ": GitStatus.STAGED,
            "A ": GitStatus.STAGED,
            "R ": GitStatus.STAGED,
        }
        for code, expected in cases.items():
            with self.subTest(code=code):
                self.assertEqual(decode_status_code(code), expected)

    def test_malformed_codes_raise(self) -> None:
        for code in ("", "M", "XY", "?M"):
            with self.subTest(code=code):
                with self.assertRaises(ValueError):
                    decode_status_code(code)

    def test_most_significant_prefers_conflicts_then_modifications(self) -> None:
        self.assertEqual(
            most_significant([GitStatus.UNTRACKED, GitStatus.MODIFIED, GitStatus.STAGED]),
            GitStatus.MODIFIED,
        )
        self.assertEqual(most_significant([GitStatus.MODIFIED, GitStatus.CONFLICTED]), GitStatus.CONFLICTED)
        self.assertEqual(most_significant([]), GitStatus.UNMODIFIED)


class PorcelainParsingTests(unittest.TestCase):
    def test_rename_records_skip_source_path(self) -> None:
        output = "R  new.txt\0old.txt\0 M src/app.py\0?? build/\0"
        self.assertEqual(
            _iter_porcelain_records(output),
            [("R ", "new.txt"), (" M", "src/app.py"), ("??", "build")],
        )


class AttributeCodesTests(unittest.TestCase):
    def test_exact_record_wins(self) -> None:
        self.assertEqual(attribute_codes({"a.txt": " M"}, "a.txt"), [" M"])

    def test_untracked_parent_is_inherited(self) -> None:
        self.assertEqual(attribute_codes({"new": "??"}, "new/file.txt"), ["??"])

    def test_directory_collects_descendant_codes_except_ignored(self) -> None:
        codes = {"src/a.py": " M", "src/b.py": "A ", "src/__pycache__": "!!", "other.txt": "??"}
        self.assertEqual(sorted(attribute_codes(codes, "src")), [" M", "A "])

    def test_clean_path_has_no_codes(self) -> None:
        self.assertEqual(attribute_codes({"a.txt": " M"}, "b.txt"), [])


if __name__ == "__main__":
    unittest.main()
