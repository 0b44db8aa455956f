"""Git queries: repository root, baseline revision and changed files.

Everything here runs before any classification happens. A failure to find
the repository or a baseline is fatal.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .models import BaseRevision
from .shell import fatal, git, git_show, git_succeeds

DEFAULT_BASE_BRANCHES = [
    "master",
    "origin/master",
    "upstream/master",
    "main",
    "origin/main",
    "upstream/main",
]


def find_root(cwd: Path) -> Path:
    """Find the closest ancestor of `cwd` (inclusive) holding a .git entry.

    The directory is located by walking up rather than asking git, so that
    the result keeps the same spelling as `cwd`.
    """
    for candidate in [cwd, *cwd.parents]:
        if (candidate / ".git").exists():
            return candidate
    fatal("This command can only be run from within a Git repository")


def find_base(root: Path, candidates: Sequence[str] = DEFAULT_BASE_BRANCHES) -> BaseRevision:
    """Find the revision the current branch diverged from.

    Every candidate branch sharing history with HEAD takes part in a single
    merge-base computation, so the most recent common ancestor wins.
    """
    ancestors = [c for c in candidates if git_succeeds("merge-base", c, "HEAD", cwd=root)]
    if not ancestors:
        fatal(
            "No ancestor could be found between any of HEAD and "
            + ", ".join(candidates)
        )

    base_hash = git("merge-base", "HEAD", *ancestors, cwd=root)
    message = git("show", "--quiet", "--pretty=format:%s", base_hash, cwd=root)
    return BaseRevision(hash=base_hash, message=message)


def fetch_changed_files(root: Path, base: str) -> list[Path]:
    """List the files changed since `base`, as sorted absolute paths.

    Includes modifications to tracked files (committed or not) and untracked
    files that aren't ignored.
    """
    tracked = git("diff", "--name-only", base, cwd=root).splitlines()
    untracked = git("ls-files", "--others", "--exclude-standard", cwd=root).splitlines()
    files = {root / f for f in [*tracked, *untracked] if f}
    return sorted(files)


def read_file_at(root: Path, base: str, path: Path) -> str | None:
    """Read a file as it was at `base`, or None if it didn't exist there."""
    relative = path.relative_to(root).as_posix()
    return git_show(base, relative, cwd=root)
