"""Bump status classification.

A workspace changed since the baseline has either recorded a decision (its
nonce differs from the one at the baseline) or not. A recorded decision is
either a pending release or a declined bump, depending on whether the
recorded target version differs from the current one.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import tomlkit

from .models import NextVersion, Status, Workspace
from .toml import get_next_version
from .vcs import read_file_at
from .workspaces import read_next_version


def get_nonce(record: NextVersion | None) -> str | None:
    return record.nonce if record is not None else None


def fetch_previous_nonce(workspace: Workspace, root: Path, base: str) -> str | None:
    """Read the nonce the workspace manifest held at `base`.

    A manifest that didn't exist at that revision has no previous nonce.
    """
    text = read_file_at(root, base, root / workspace.path / "pyproject.toml")
    if text is None:
        return None
    return get_nonce(read_next_version(get_next_version(tomlkit.parse(text))))


def will_be_released(workspace: Workspace) -> bool:
    """Whether the recorded decision targets a version other than the current one."""
    record = workspace.next_version
    return (
        record is not None
        and record.version is not None
        and record.version != workspace.version
    )


def fetch_workspaces_status(
    workspaces: Iterable[Workspace], root: Path, base: str
) -> Status:
    """Classify the given workspaces as decided, undecided or declined.

    Workspaces without a version aren't subject to release accounting and
    are left out of every list.
    """
    status = Status()

    for workspace in workspaces:
        if workspace.version is None:
            continue

        current_nonce = get_nonce(workspace.next_version)
        previous_nonce = fetch_previous_nonce(workspace, root, base)

        # Same nonce: no decision recorded since the branch diverged
        if current_nonce == previous_nonce:
            status.undecided.append(workspace)
        elif will_be_released(workspace):
            status.decided.append(workspace)
        else:
            status.declined.append(workspace)

    return status
