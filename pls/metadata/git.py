"""Git working-tree status for listed entries.

One ``git status`` call covers every path the collector asks about. Records
are decoded per entry afterwards, so a malformed record only affects the
entry it belongs to.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from ..enums import GitStatus
from ..errors import EntryError

GIT_TIMEOUT_SECONDS = 2.0

_CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})
_VALID_CODE_CHARS = frozenset(" MTADRCU")

# Most to least significant when several records fall under one directory.
_SEVERITY = (
    GitStatus.CONFLICTED,
    GitStatus.MODIFIED,
    GitStatus.STAGED,
    GitStatus.UNTRACKED,
    GitStatus.IGNORED,
    GitStatus.UNMODIFIED,
)


def _run_git(repo_root: Path, args: list[str], timeout_seconds: float) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            ["git", "-C", str(repo_root), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except (OSError, subprocess.SubprocessError):
        return None


def _iter_porcelain_records(output: str) -> list[tuple[str, str]]:
    records: list[tuple[str, str]] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token:
            continue
        if len(token) < 4 or token[2] != " ":
            continue

        status = token[:2]
        path_text = token[3:].rstrip("/")
        records.append((status, path_text))

        # For renamed/copied entries, porcelain -z appends an extra token
        # containing the source path; the first path token is the destination.
        if "R" in status or "C" in status:
            index += 1

    return records


def decode_status_code(code: str) -> GitStatus:
    """Map a two-letter porcelain ``XY`` code onto ``GitStatus``.

    Raises ``ValueError`` for codes git does not produce.
    """
    if len(code) != 2:
        raise ValueError(f"malformed status code {code!r}")
    if code == "??":
        return GitStatus.UNTRACKED
    if code == "!!":
        return GitStatus.IGNORED
    if code in _CONFLICT_CODES:
        return GitStatus.CONFLICTED
    index_char, worktree_char = code
    if index_char not in _VALID_CODE_CHARS or worktree_char not in _VALID_CODE_CHARS:
        raise ValueError(f"unrecognized status code {code!r}")
    if worktree_char != " ":
        return GitStatus.MODIFIED
    if index_char != " ":
        return GitStatus.STAGED
    return GitStatus.UNMODIFIED


def most_significant(statuses: list[GitStatus]) -> GitStatus:
    for candidate in _SEVERITY:
        if candidate in statuses:
            return candidate
    return GitStatus.UNMODIFIED


class GitStatusSource:
    """Default version-control collaborator shelling out to ``git``."""

    def __init__(self, timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> None:
        self.timeout_seconds = timeout_seconds

    def repository_root(self, directory: Path) -> Path | None:
        """Return the working-tree root containing ``directory``, if any."""
        if shutil.which("git") is None:
            return None
        proc = _run_git(directory, ["rev-parse", "--show-toplevel"], self.timeout_seconds)
        if proc is None or proc.returncode != 0:
            return None
        top_level = proc.stdout.strip()
        if not top_level:
            return None
        return Path(top_level).resolve()

    def status_codes(self, repo_root: Path, rel_paths: list[str]) -> dict[str, str]:
        """Return porcelain codes for changed paths at or below ``rel_paths``.

        Keys are repository-relative paths. Paths absent from the result are
        clean. Raises ``EntryError`` when git cannot report status.
        """
        if not rel_paths:
            return {}
        proc = _run_git(
            repo_root,
            [
                "--literal-pathspecs",
                "status",
                "--porcelain=v1",
                "-z",
                "--untracked-files=normal",
                "--ignored=matching",
                "--",
                *rel_paths,
            ],
            self.timeout_seconds,
        )
        if proc is None or proc.returncode != 0:
            raise EntryError(repo_root, "git status failed")
        return {path: status for status, path in _iter_porcelain_records(proc.stdout)}


def attribute_codes(codes: dict[str, str], rel_path: str) -> list[str]:
    """Return the codes that describe ``rel_path``.

    A record for the path itself always counts, as does an untracked or
    ignored record for an enclosing directory. Records below the path count
    except ignored ones, so a directory holding ignored build output is not
    reported as ignored.
    """
    exact = codes.get(rel_path)
    if exact is not None:
        return [exact]
    parent = rel_path
    while "/" in parent:
        parent = parent.rsplit("/", 1)[0]
        inherited = codes.get(parent)
        if inherited in ("??", "!!"):
            return [inherited]
    prefix = f"{rel_path}/"
    return [code for path, code in codes.items() if path.startswith(prefix) and code != "!!"]


__all__ = [
    "GIT_TIMEOUT_SECONDS",
    "GitStatusSource",
    "attribute_codes",
    "decode_status_code",
    "most_significant",
]
