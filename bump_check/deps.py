"""Dependency handling utilities.

Parses PEP 508 dependency strings so that each workspace's dependencies can
be resolved to other workspaces of the same repository.
"""

from __future__ import annotations

from collections.abc import Iterable

from packaging.requirements import Requirement
from packaging.utils import canonicalize_name


def dep_canonical_name(dep_str: str) -> str:
    """Extract the canonical package name from a PEP 508 dependency string.

    Handles version specifiers, extras, and normalizes the name per PEP 503
    (lowercase, hyphens instead of underscores).

    Examples:
        "requests>=2.0" → "requests"
        "My_Package[extra]~=1.0" → "my-package"
    """
    return canonicalize_name(Requirement(dep_str).name)


def internal_dep_names(dep_strs: Iterable[str], workspace_names: set[str]) -> list[str]:
    """Resolve dependency strings to the workspace names they point at.

    External packages are ignored. Each internal name is reported once, in
    the order it is first declared.
    """
    deps: list[str] = []
    for dep_str in dep_strs:
        name = dep_canonical_name(dep_str)
        if name in workspace_names and name not in deps:
            deps.append(name)
    return deps
