"""Release decision check: diff → classify → propagate → report or prompt.

This module orchestrates `bump-check check`:
1. Find the repository root and the revision the branch started from
2. List the files changed since then
3. Discover the workspaces and map the changed files to them
4. Classify the changed workspaces as decided, undecided or declined
5. Either report what is missing (exit code 1 if anything is), or let the
   user decide interactively and record the decisions with `bump-check defer`

All git queries happen before the report or the session starts. Manifests
are only written once an interactive session has been confirmed.
"""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Mapping
from pathlib import Path

import click

from .graph import fetch_undecided_dependents
from .interactive import DecisionSession, run_session
from .models import ChangeSet, Decision, Status, Workspace
from .shell import fatal, run
from .status import fetch_workspaces_status
from .toml import get_tool_config, load_pyproject
from .vcs import DEFAULT_BASE_BRANCHES, fetch_changed_files, find_base, find_root
from .workspaces import discover_workspaces, fetch_impacted_workspaces


def get_base_branches(root: Path) -> list[str]:
    """Read the baseline candidates from [tool.bump-check].base-branches."""
    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        fatal("No pyproject.toml found at the repository root.")
    branches = get_tool_config(load_pyproject(pyproject)).get("base-branches")
    return [str(b) for b in branches] if branches else list(DEFAULT_BASE_BRANCHES)


def fetch_change_set(cwd: Path) -> ChangeSet:
    root = find_root(cwd)
    branches = get_base_branches(root)
    try:
        base = find_base(root, branches)
        files = fetch_changed_files(root, base.hash)
    except FileNotFoundError:
        fatal("git is required but wasn't found on PATH")
    except subprocess.CalledProcessError as e:
        fatal(f"`{' '.join(e.cmd)}` failed: {(e.stderr or '').strip()}")
    return ChangeSet(root=root, base=base, files=files)


def _separator() -> None:
    click.echo(click.style("─" * 60, dim=True))


def _error(msg: str) -> None:
    click.echo(f"{click.style('error', fg='red', bold=True)}: {msg}")


def run_report(
    change_set: ChangeSet, status: Status, workspaces: Mapping[str, Workspace]
) -> int:
    """Print the undecided workspaces and dependents.

    Returns:
        1 if any workspace still needs a decision, 0 otherwise.
    """
    root = change_set.root
    files = change_set.files
    base = change_set.base

    has_diff_errors = False
    has_deps_errors = False

    click.echo(
        f"Your PR was started right after {click.style(base.short_hash, fg='yellow')} "
        f"{click.style(base.message, fg='magenta')}"
    )

    if files:
        click.echo("You have changed the following files since then:")
        for f in files:
            click.echo(f"  {f.relative_to(root).as_posix()}")

    if status.undecided:
        if files:
            _separator()
        for ws in status.undecided:
            _error(f"{ws.name} has been modified but doesn't have a bump strategy attached")
        has_diff_errors = True

    # Workspaces depending on a package that will be released again, but
    # without a release strategy of their own
    for ws, dependency in fetch_undecided_dependents(
        status.decided, status.declined, workspaces
    ):
        if not has_deps_errors and (files or has_diff_errors):
            _separator()
        _error(
            f"{ws.name} doesn't have a bump strategy attached, but depends on "
            f"{dependency.name} which will be re-released."
        )
        has_deps_errors = True

    if has_diff_errors or has_deps_errors:
        _separator()
        click.echo(
            "Some workspaces have received modifications but no explicit "
            "instructions as to how they have to be released (if needed)."
        )
        click.echo(
            "To fix this, run `bump-check defer <strategy> --path <workspace>` for "
            "each of them (or `bump-check check -i`), then run `bump-check check` again."
        )
        return 1

    return 0


def apply_decisions(
    decisions: Mapping[str, Decision],
    workspaces: Mapping[str, Workspace],
    root: Path,
) -> int:
    """Record each decision by running `bump-check defer` in its workspace.

    Invocations run one after the other, in workspace declaration order.

    Returns:
        Exit code of the last invocation, 0 if nothing had to be recorded.
    """
    code = 0
    for name, ws in workspaces.items():
        decision = decisions.get(name, Decision.UNDECIDED)
        if decision is Decision.UNDECIDED:
            continue
        result = run(
            sys.executable,
            "-m",
            "bump_check",
            "defer",
            decision.value,
            "--path",
            str(root / ws.path),
            check=False,
        )
        code = result.returncode
    return code


def run_interactive(
    change_set: ChangeSet,
    status: Status,
    workspaces: Mapping[str, Workspace],
    impacted: list[Workspace],
) -> int:
    """Let the user pick strategies, then record them.

    Returns:
        1 if the session was aborted, otherwise the exit code of the last
        `bump-check defer` invocation.
    """
    if not impacted:
        return 0
    if not status.undecided and not fetch_undecided_dependents(
        status.decided, status.declined, workspaces
    ):
        return 0

    session = DecisionSession(status, workspaces, change_set.files, change_set.root)
    decisions = run_session(session)
    if decisions is None:
        return 1

    return apply_decisions(decisions, workspaces, change_set.root)


def run_check(cwd: Path, *, interactive: bool = False, verbose: bool = False) -> int:
    """Execute the check and return the process exit code."""
    change_set = fetch_change_set(cwd)
    workspaces = discover_workspaces(change_set.root, verbose=verbose)
    impacted = fetch_impacted_workspaces(workspaces, change_set.root, change_set.files)
    status = fetch_workspaces_status(impacted, change_set.root, change_set.base.hash)

    if interactive:
        return run_interactive(change_set, status, workspaces, impacted)
    return run_report(change_set, status, workspaces)
