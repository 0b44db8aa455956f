"""Shell and git utilities.

Provides thin wrappers around subprocess calls for running git and other
commands, plus the output helpers used for progress and fatal errors.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import NoReturn

import click


def git(*args: str, cwd: Path | None = None, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "merge-base", "master", "HEAD").
        cwd: Directory to run git in. Defaults to the current directory.
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., reading a
               file at a revision where it did not exist yet).

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=check
    )
    return result.stdout.strip()


def git_succeeds(*args: str, cwd: Path | None = None) -> bool:
    """Run a git command only for its exit status."""
    result = subprocess.run(["git", *args], cwd=cwd, capture_output=True)
    return result.returncode == 0


def git_show(revision: str, path: str, cwd: Path | None = None) -> str | None:
    """Return the content of `path` at `revision`, or None if git can't find it.

    Unlike git(), the output is not stripped: manifests are parsed as-is.
    """
    result = subprocess.run(
        ["git", "show", f"{revision}:{path}"],
        cwd=cwd,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        return None
    return result.stdout


def run(*args: str, check: bool = True) -> subprocess.CompletedProcess[bytes]:
    """Run an arbitrary command.

    Unlike git(), this doesn't capture output - it streams directly to
    the terminal so users can see what each command reports.

    Returns:
        CompletedProcess with returncode for checking success.
    """
    return subprocess.run(args, check=check)


def step(msg: str) -> None:
    """Print a visually distinct step header."""
    click.echo(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def fatal(msg: str) -> NoReturn:
    """Print an error message and exit with code 1.

    Use for environment errors that should halt the command before any
    classification happens.
    """
    click.echo(f"ERROR: {msg}", err=True)
    sys.exit(1)
