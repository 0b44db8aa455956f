"""Workspace discovery and file ownership.

Reads [tool.uv.workspace] from the root pyproject.toml to find the package
directories, then loads name, version, visibility, decision record and
internal dependencies from each package's pyproject.toml.
"""

from __future__ import annotations

import glob
from collections.abc import Iterable
from pathlib import Path

import click
from packaging.requirements import InvalidRequirement

from .deps import internal_dep_names
from .models import NextVersion, Workspace
from .shell import fatal, step
from .toml import (
    get_all_dependency_strings,
    get_next_version,
    get_project_name,
    get_project_version,
    get_workspace_exclude_globs,
    get_workspace_member_globs,
    is_private,
    load_pyproject,
)
from .versions import is_valid_version


def read_next_version(record: dict | None) -> NextVersion | None:
    """Convert a raw [tool.bump-check.next-version] table to a model.

    Nonces may have been written as strings or integers; anything else is
    treated as missing.
    """
    if record is None:
        return None
    nonce = record.get("nonce")
    version = record.get("version")
    return NextVersion(
        nonce=str(nonce) if isinstance(nonce, (str, int)) else None,
        version=str(version) if isinstance(version, str) else None,
    )


def _member_dirs(root: Path, doc) -> list[Path]:
    excluded: set[Path] = set()
    for pattern in get_workspace_exclude_globs(doc):
        excluded.update(Path(m) for m in glob.glob(str(root / pattern)))

    member_dirs: list[Path] = []
    for pattern in get_workspace_member_globs(doc):
        for match in sorted(glob.glob(str(root / pattern))):
            p = Path(match)
            if p in excluded or p in member_dirs:
                continue
            if (p / "pyproject.toml").exists():
                member_dirs.append(p)
    return member_dirs


def discover_workspaces(root: Path, *, verbose: bool = False) -> dict[str, Workspace]:
    """Scan the repository and discover all workspaces.

    The root project is itself a workspace when its pyproject.toml declares
    a [project] table.

    Returns:
        Map of workspace name to Workspace, in declaration order.
    """
    step("Discovering workspace packages")

    root_doc = load_pyproject(root / "pyproject.toml")
    member_dirs = _member_dirs(root, root_doc)
    if "project" in root_doc:
        member_dirs.insert(0, root)

    if not member_dirs:
        fatal("No packages found matching workspace members")

    # First pass: collect basic info from each package
    workspaces: dict[str, Workspace] = {}
    raw_deps: dict[str, list[str]] = {}

    for d in member_dirs:
        manifest = d / "pyproject.toml"
        doc = root_doc if d == root else load_pyproject(manifest)
        name = get_project_name(doc, d.name)
        version = get_project_version(doc)
        if version is not None and not is_valid_version(version):
            fatal(f"{name} has an invalid version {version!r} in {manifest}")
        workspaces[name] = Workspace(
            name=name,
            path=d.relative_to(root).as_posix(),
            version=version,
            private=is_private(doc),
            next_version=read_next_version(get_next_version(doc)),
        )
        raw_deps[name] = get_all_dependency_strings(doc)

    # Second pass: identify which deps are internal (within workspace)
    workspace_names = set(workspaces)
    for name, deps in raw_deps.items():
        try:
            internal = internal_dep_names(deps, workspace_names)
        except InvalidRequirement as e:
            manifest = root / workspaces[name].path / "pyproject.toml"
            fatal(f"Invalid dependency in {manifest}: {e}")
        workspaces[name].deps = [dep for dep in internal if dep != name]

    if verbose:
        for ws in workspaces.values():
            deps = f" → [{', '.join(ws.deps)}]" if ws.deps else ""
            private = " private" if ws.private else ""
            click.echo(f"  {ws.name} {ws.version or '<unversioned>'} ({ws.path}){private}{deps}")

    return workspaces


def workspace_for_file(
    workspaces: dict[str, Workspace], root: Path, path: Path
) -> Workspace | None:
    """Return the workspace owning `path`: the one with the deepest directory
    containing it. None if the file belongs to no workspace.
    """
    owner: Workspace | None = None
    owner_depth = -1
    for ws in workspaces.values():
        ws_dir = root / ws.path
        if path == ws_dir or ws_dir in path.parents:
            depth = len(ws_dir.parts)
            if depth > owner_depth:
                owner, owner_depth = ws, depth
    return owner


def fetch_impacted_workspaces(
    workspaces: dict[str, Workspace], root: Path, files: Iterable[Path]
) -> list[Workspace]:
    """Map changed files to their owning workspaces.

    Each workspace is listed once, in the order its first file appears.
    """
    impacted: dict[str, Workspace] = {}
    for f in files:
        ws = workspace_for_file(workspaces, root, f)
        if ws is not None and ws.name not in impacted:
            impacted[ws.name] = ws
    return list(impacted.values())
