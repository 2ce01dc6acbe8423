"""Metadata collector tests with fake enumeration and status collaborators.

Real temporary directories supply stat data; git is replaced by a fake that
returns canned porcelain codes so the status paths run without a binary.
"""

from __future__ import annotations

import errno
import os
import tempfile
import unittest
from pathlib import Path

from pls.config import EffectiveSpec, ImportancePattern
from pls.enums import FileType, GitStatus
from pls.errors import EntryError, EnumerationError, EnumerationErrorKind
from pls.metadata import DirectoryLister, MetadataCollector, RawEntry, SymlinkState, symbolic_permissions
from pls.patterns import NamePattern


class FakeGit:
    def __init__(self, root: Path | None, codes: dict[str, str] | None = None, fail: bool = False) -> None:
        self.root = root
        self.codes = codes or {}
        self.fail = fail
        self.calls: list[list[str]] = []

    def repository_root(self, directory: Path) -> Path | None:
        return self.root

    def status_codes(self, repo_root: Path, rel_paths: list[str]) -> dict[str, str]:
        self.calls.append(list(rel_paths))
        if self.fail:
            raise EntryError(repo_root, "git status failed")
        return dict(self.codes)


class VanishingLister(DirectoryLister):
    """Reports a name whose stat fails as if it was deleted after the scan."""

    def __init__(self, ghost: str, broken: str | None = None) -> None:
        self.ghost = ghost
        self.broken = broken

    def list_names(self, directory: Path) -> list[str]:
        names = super().list_names(directory)
        return [*names, self.ghost]

    def stat(self, path: Path) -> RawEntry:
        if path.name == self.broken:
            raise EntryError(path, "cannot stat: Permission denied")
        return super().stat(path)


def _touch(path: Path, text: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class CollectTests(unittest.TestCase):
    def test_enumerates_direct_children_in_scan_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("b.txt", "a.txt", "c.txt"):
                _touch(root / name, name)
            _touch(root / "sub" / "deep.txt")

            scan_order = DirectoryLister().list_names(root)
            listing = MetadataCollector(vcs=FakeGit(None)).collect(root, EffectiveSpec())

        names = [entry.name for entry in listing.entries]
        self.assertEqual(sorted(names), ["a.txt", "b.txt", "c.txt", "sub"])
        self.assertEqual(names, scan_order)
        self.assertEqual(listing.top_level_count, 4)
        self.assertTrue(all(parent is None for parent in listing.parents))
        self.assertTrue(all(entry.git_status is GitStatus.NONE for entry in listing.entries))

    def test_normalizes_permissions_and_owner_names(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / "script.sh")
            os.chmod(root / "script.sh", 0o754)

            listing = MetadataCollector(vcs=FakeGit(None)).collect(root, EffectiveSpec())

        (entry,) = listing.entries
        self.assertEqual(entry.permissions, "-rwxr-xr--")
        self.assertTrue(entry.owner)
        self.assertTrue(entry.group)
        self.assertEqual(symbolic_permissions(0o40755), "drwxr-xr-x")

    def test_hidden_and_name_filters(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in (".env", "a.py", "b.py", "notes.md"):
                _touch(root / name)
            collector = MetadataCollector(vcs=FakeGit(None))

            default = collector.collect(root, EffectiveSpec())
            shown = collector.collect(root, EffectiveSpec(hidden=True))
            only = collector.collect(root, EffectiveSpec(only=NamePattern.parse("*.py")))
            exclude = collector.collect(root, EffectiveSpec(exclude=NamePattern.parse("re:^a")))

        self.assertNotIn(".env", [e.name for e in default.entries])
        self.assertIn(".env", [e.name for e in shown.entries])
        self.assertEqual(sorted(e.name for e in only.entries), ["a.py", "b.py"])
        self.assertEqual(sorted(e.name for e in exclude.entries), ["b.py", "notes.md"])

    def test_symlink_metadata_is_not_followed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / "target.txt", "x" * 100)
            os.symlink("target.txt", root / "good")
            os.symlink("missing.txt", root / "dangling")

            listing = MetadataCollector(vcs=FakeGit(None)).collect(root, EffectiveSpec())
            by_name = {entry.name: entry for entry in listing.entries}

            self.assertIs(by_name["good"].file_type, FileType.SYMLINK)
            self.assertEqual(by_name["good"].raw.symlink_target, "target.txt")
            self.assertEqual(by_name["good"].symlink_state, SymlinkState.OK)
            self.assertEqual(by_name["dangling"].symlink_state, SymlinkState.BROKEN)
            self.assertIsNone(by_name["target.txt"].symlink_state)

    def test_vanished_entry_is_dropped_silently_and_failed_stat_is_counted(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / "kept.txt")
            _touch(root / "locked.txt")
            collector = MetadataCollector(lister=VanishingLister("ghost.txt", broken="locked.txt"), vcs=FakeGit(None))

            with self.assertLogs("pls.metadata.collect", level="WARNING") as logs:
                listing = collector.collect(root, EffectiveSpec())

        self.assertEqual([entry.name for entry in listing.entries], ["kept.txt"])
        self.assertEqual(listing.dropped, 1)
        self.assertTrue(any("locked.txt" in line for line in logs.output))
        self.assertFalse(any("ghost.txt" in line for line in logs.output))

    def test_type_filter_keeps_only_listed_types(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / "a.txt")
            (root / "docs").mkdir()
            os.symlink("a.txt", root / "link")

            spec = EffectiveSpec(types=frozenset({FileType.DIR, FileType.SYMLINK}))
            listing = MetadataCollector(vcs=FakeGit(None)).collect(root, spec)

        self.assertEqual(sorted(entry.name for entry in listing.entries), ["docs", "link"])
        self.assertEqual(listing.dropped, 0)

    def test_importance_below_threshold_is_hidden(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("Cargo.toml", "Cargo.lock", ".DS_Store"):
                _touch(root / name)

            importance = (
                ImportancePattern(pattern=NamePattern.parse(".DS_Store"), level=-2),
                ImportancePattern(pattern=NamePattern.parse("*.lock"), level=-1),
            )
            collector = MetadataCollector(vcs=FakeGit(None))
            default = collector.collect(root, EffectiveSpec(hidden=True, importance=importance))
            strict = collector.collect(root, EffectiveSpec(hidden=True, importance=importance, min_importance=0))
            everything = collector.collect(root, EffectiveSpec(hidden=True, importance=importance, min_importance=-2))

        self.assertEqual(sorted(entry.name for entry in default.entries), ["Cargo.lock", "Cargo.toml"])
        self.assertEqual([entry.name for entry in strict.entries], ["Cargo.toml"])
        self.assertEqual(len(everything.entries), 3)

    def test_missing_target_is_enumeration_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "nope"
            with self.assertRaises(EnumerationError) as ctx:
                MetadataCollector(vcs=FakeGit(None)).collect(missing, EffectiveSpec())
        self.assertIs(ctx.exception.kind, EnumerationErrorKind.NOT_FOUND)

    def test_file_target_is_not_a_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "file.txt"
            _touch(target)
            with self.assertRaises(EnumerationError) as ctx:
                MetadataCollector(vcs=FakeGit(None)).collect(target, EffectiveSpec())
        self.assertIs(ctx.exception.kind, EnumerationErrorKind.NOT_A_DIRECTORY)


class EnumerationErrorMappingTests(unittest.TestCase):
    def test_only_permission_errors_report_permission_denied(self) -> None:
        path = Path("/work")
        denied = EnumerationError.from_os_error(path, PermissionError(errno.EACCES, "Permission denied"))
        looping = EnumerationError.from_os_error(path, OSError(errno.ELOOP, "Too many levels of symbolic links"))

        self.assertIs(denied.kind, EnumerationErrorKind.PERMISSION_DENIED)
        self.assertEqual(str(denied), "/work: permission denied")
        self.assertIs(looping.kind, EnumerationErrorKind.OTHER)
        self.assertEqual(str(looping), "/work: too many levels of symbolic links")


class GitStatusCollectionTests(unittest.TestCase):
    def test_one_batched_call_and_per_entry_statuses(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("changed.txt", "clean.txt", "new.txt", "staged.txt"):
                _touch(root / name)
            _touch(root / "pkg" / "mod.py")
            git = FakeGit(
                root,
                {"changed.txt": " M", "new.txt": "??", "staged.txt": "A ", "pkg/mod.py": "UU"},
            )

            listing = MetadataCollector(vcs=git).collect(root, EffectiveSpec())

        statuses = {entry.name: entry.git_status for entry in listing.entries}
        self.assertEqual(len(git.calls), 1)
        self.assertEqual(sorted(git.calls[0]), ["changed.txt", "clean.txt", "new.txt", "pkg", "staged.txt"])
        self.assertEqual(
            statuses,
            {
                "changed.txt": GitStatus.MODIFIED,
                "clean.txt": GitStatus.UNMODIFIED,
                "new.txt": GitStatus.UNTRACKED,
                "staged.txt": GitStatus.STAGED,
                "pkg": GitStatus.CONFLICTED,
            },
        )

    def test_one_bad_status_code_marks_only_that_entry_unknown(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            names = ["a.txt", "b.txt", "c.txt", "d.txt", "e.txt"]
            for name in names:
                _touch(root / name)
            git = FakeGit(root, {"a.txt": " M", "b.txt": "??", "c.txt": "XY", "d.txt": "M ", "e.txt": "!!"})

            with self.assertLogs("pls.metadata.collect", level="WARNING"):
                listing = MetadataCollector(vcs=git).collect(root, EffectiveSpec(hidden=True))

        statuses = {entry.name: entry.git_status for entry in listing.entries}
        self.assertEqual(len(listing.entries), 5)
        self.assertEqual(listing.dropped, 0)
        self.assertIs(statuses["c.txt"], GitStatus.UNKNOWN)
        self.assertIs(statuses["a.txt"], GitStatus.MODIFIED)
        self.assertIs(statuses["b.txt"], GitStatus.UNTRACKED)
        self.assertIs(statuses["d.txt"], GitStatus.STAGED)
        self.assertIs(statuses["e.txt"], GitStatus.IGNORED)

    def test_failed_status_call_marks_every_entry_unknown(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / "a.txt")
            _touch(root / "b.txt")

            with self.assertLogs("pls.metadata.collect", level="WARNING"):
                listing = MetadataCollector(vcs=FakeGit(root, fail=True)).collect(root, EffectiveSpec())

        self.assertEqual({entry.git_status for entry in listing.entries}, {GitStatus.UNKNOWN})


class ChainProbeTests(unittest.TestCase):
    def test_probes_single_child_chains_when_collapsing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / "a" / "b" / "c" / "file.txt")
            _touch(root / "top.txt")

            listing = MetadataCollector(vcs=FakeGit(None)).collect(root, EffectiveSpec(collapse=True))

        names = [entry.name for entry in listing.entries]
        self.assertEqual(listing.top_level_count, 2)
        self.assertEqual(sorted(names[:2]), ["a", "top.txt"])
        self.assertEqual(names[2:], ["b", "c", "file.txt"])
        a_index = names.index("a")
        self.assertEqual(listing.parents[2:], (a_index, 2, 3))
        self.assertEqual(listing.child_counts[a_index], 1)
        self.assertEqual(listing.child_counts[2:], (1, 1, None))

    def test_probe_stops_at_directory_with_several_children(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / "a" / "b" / "c" / "file.txt")
            _touch(root / "a" / "b" / "other.txt")

            listing = MetadataCollector(vcs=FakeGit(None)).collect(root, EffectiveSpec(collapse=True))

        self.assertEqual([entry.name for entry in listing.entries], ["a", "b"])
        self.assertEqual(listing.child_counts, (1, 2))

    def test_no_probing_without_collapse(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / "a" / "b" / "file.txt")

            listing = MetadataCollector(vcs=FakeGit(None)).collect(root, EffectiveSpec())

        self.assertEqual([entry.name for entry in listing.entries], ["a"])
        self.assertEqual(listing.child_counts, (None,))


if __name__ == "__main__":
    unittest.main()
