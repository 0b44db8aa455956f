"""TOML reading and writing utilities.

Uses tomlkit to preserve formatting and comments when modifying pyproject.toml
files. Decision records live in each workspace manifest under
[tool.bump-check.next-version], so rewriting them must not disturb the rest
of the file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from packaging.utils import canonicalize_name

from .shell import fatal

TOOL_KEY = "bump-check"
NEXT_VERSION_KEY = "next-version"
PRIVATE_CLASSIFIER = "Private :: Do Not Upload"


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a pyproject.toml file.

    Returns a TOMLDocument that preserves formatting when modified and saved.
    """
    return tomlkit.parse(path.read_text())


def save_pyproject(path: Path, doc: tomlkit.TOMLDocument) -> None:
    """Save a TOMLDocument back to disk, preserving original formatting."""
    path.write_text(tomlkit.dumps(doc))


def get_project_name(doc: tomlkit.TOMLDocument, fallback: str) -> str:
    """Extract the canonical package name from [project].name.

    Names are normalized per PEP 503 (lowercase, hyphens instead of
    underscores) for consistent comparison.
    """
    return canonicalize_name(doc.get("project", {}).get("name", fallback))


def get_project_version(doc: tomlkit.TOMLDocument) -> str | None:
    """Extract version from [project].version.

    Returns None when the version is absent (including when it is declared
    dynamic): such packages are not independently versioned.
    """
    version = doc.get("project", {}).get("version")
    return str(version) if version is not None else None


def get_tool_config(doc: tomlkit.TOMLDocument) -> dict[str, Any]:
    """Return the [tool.bump-check] table, or an empty dict."""
    return doc.get("tool", {}).get(TOOL_KEY, {})


def is_private(doc: tomlkit.TOMLDocument) -> bool:
    """Whether the package is marked as never being published.

    Either the conventional "Private :: Do Not Upload" classifier or
    [tool.bump-check].private = true marks a package as private.
    """
    classifiers = doc.get("project", {}).get("classifiers", [])
    if PRIVATE_CLASSIFIER in classifiers:
        return True
    return bool(get_tool_config(doc).get("private", False))


def get_next_version(doc: tomlkit.TOMLDocument) -> dict[str, Any] | None:
    """Return the raw [tool.bump-check.next-version] table, if any."""
    record = get_tool_config(doc).get(NEXT_VERSION_KEY)
    return record if isinstance(record, dict) else None


def set_next_version(
    doc: tomlkit.TOMLDocument, nonce: str, version: str | None
) -> None:
    """Write the decision record, replacing any previous one."""
    tool = doc.setdefault("tool", tomlkit.table(is_super_table=True))
    config = tool.setdefault(TOOL_KEY, tomlkit.table(is_super_table=True))
    record = tomlkit.table()
    record["nonce"] = nonce
    if version is not None:
        record["version"] = version
    config[NEXT_VERSION_KEY] = record


def clear_next_version(doc: tomlkit.TOMLDocument) -> None:
    """Remove the decision record, and the tool table if it ends up empty."""
    tool = doc.get("tool")
    if tool is None or TOOL_KEY not in tool:
        return
    config = tool[TOOL_KEY]
    if NEXT_VERSION_KEY in config:
        del config[NEXT_VERSION_KEY]
    if not config:
        del tool[TOOL_KEY]
    if not tool:
        del doc["tool"]


def get_all_dependency_strings(doc: tomlkit.TOMLDocument) -> list[str]:
    """Collect all dependency strings from a pyproject.toml.

    Gathers dependencies from three locations:
    - [project].dependencies (main runtime deps)
    - [project].optional-dependencies.* (extras like [dev], [test])
    - [dependency-groups].* (PEP 735 dependency groups)

    Returns raw PEP 508 strings like "requests>=2.0" or "pkg[extra]~=1.0".
    Include-group tables inside dependency groups are skipped.
    """
    project = doc.get("project", {})
    deps: list[str] = list(project.get("dependencies", []))
    for group_deps in project.get("optional-dependencies", {}).values():
        deps.extend(group_deps)
    for group_deps in doc.get("dependency-groups", {}).values():
        deps.extend(d for d in group_deps if isinstance(d, str))
    return deps


def get_workspace_member_globs(doc: tomlkit.TOMLDocument) -> list[str]:
    """Extract workspace member glob patterns from [tool.uv.workspace].

    Raises:
        SystemExit: If no workspace members are defined.
    """
    members = doc.get("tool", {}).get("uv", {}).get("workspace", {}).get("members")
    if not members:
        fatal("No [tool.uv.workspace] members defined in root pyproject.toml")
    return list(members)


def get_workspace_exclude_globs(doc: tomlkit.TOMLDocument) -> list[str]:
    """Extract [tool.uv.workspace].exclude patterns, if any."""
    return list(doc.get("tool", {}).get("uv", {}).get("workspace", {}).get("exclude", []))
