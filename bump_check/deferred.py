"""Recording and applying deferred release decisions.

`bump-check defer` stores a decision in the workspace manifest without
touching its version: a fresh nonce marks that a decision was made, and the
target version tells whether it is a release or a declined bump.
`bump-check apply` later turns the pending records into actual versions.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from uuid import uuid4

import click

from .models import Decision, VersionBump, Workspace
from .shell import fatal, step
from .toml import (
    clear_next_version,
    get_project_version,
    load_pyproject,
    save_pyproject,
    set_next_version,
)
from .versions import is_valid_version, next_version, strategies_for


def defer_decision(manifest_path: Path, decision: Decision) -> str | None:
    """Record `decision` in the manifest at `manifest_path`.

    Returns:
        The version the package will be released at, or None when the
        decision was reset to undecided.

    Raises:
        SystemExit: If the package has no valid version, or if the strategy isn't
            available for its current version.
    """
    doc = load_pyproject(manifest_path)
    version = get_project_version(doc)
    if version is None:
        fatal(f"{manifest_path} has no [project].version to bump")
    if not is_valid_version(version):
        fatal(f"{manifest_path} has an invalid version {version!r}")

    if decision not in strategies_for(version):
        fatal(f"Can't use the {decision.value} strategy on {version}")

    if decision is Decision.UNDECIDED:
        clear_next_version(doc)
        save_pyproject(manifest_path, doc)
        return None

    target = next_version(version, decision)
    set_next_version(doc, uuid4().hex, target)
    save_pyproject(manifest_path, doc)
    return target


def apply_deferred(
    workspaces: Mapping[str, Workspace], root: Path
) -> dict[str, VersionBump]:
    """Apply every pending decision record to its workspace version.

    Declined records are dropped without changing the version.

    Returns:
        Map of workspace name → VersionBump for the workspaces whose version
        changed.
    """
    step("Applying deferred versions")

    bumped: dict[str, VersionBump] = {}
    for ws in workspaces.values():
        record = ws.next_version
        if record is None:
            continue

        manifest = root / ws.path / "pyproject.toml"
        doc = load_pyproject(manifest)
        if record.version is not None and record.version != ws.version:
            doc["project"]["version"] = record.version
            bumped[ws.name] = VersionBump(old=ws.version or "", new=record.version)
            click.echo(f"  {ws.name}: {ws.version} → {record.version}")
        clear_next_version(doc)
        save_pyproject(manifest, doc)

    if not bumped:
        click.echo("  No pending releases")
    return bumped
