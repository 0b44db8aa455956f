"""Dependency propagation.

When a workspace is going to be released again, every public workspace
depending on it needs a decision of its own. The check below only looks one
hop away from the decided workspaces: dependents further down the graph
surface once their own dependency has been decided and the check runs again.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping

from .models import Workspace


def fetch_undecided_dependents(
    decided: Iterable[Workspace],
    declined: Iterable[Workspace],
    workspaces: Mapping[str, Workspace],
    exclude: Collection[str] = frozenset(),
) -> list[tuple[Workspace, Workspace]]:
    """Find workspaces depending on a decided workspace without a decision.

    Args:
        decided: Workspaces that will be released again.
        declined: Workspaces that explicitly won't be.
        workspaces: The full workspace graph, in declaration order.
        exclude: Names to check even if they are already decided or declined.
                 Lets the interactive session keep showing rows the user
                 has just assigned a decision to.

    Returns:
        (dependent, dependency) pairs. A dependent appears once per decided
        dependency.

    Raises:
        AssertionError: If a dependency isn't part of the workspace graph.
    """
    bumped = {ws.name: ws for ws in decided}
    declined_names = {ws.name for ws in declined}

    undecided: list[tuple[Workspace, Workspace]] = []
    for workspace in workspaces.values():
        if workspace.name not in exclude:
            if workspace.name in declined_names or workspace.name in bumped:
                continue

        # Private packages are never re-released for their dependencies' sake
        if workspace.private:
            continue

        if workspace.version is None:
            continue

        for dep in workspace.deps:
            if dep not in workspaces:
                raise AssertionError(
                    f"{workspace.name} depends on {dep}, which isn't part of the workspace"
                )
            # The dependency may be private: a public package can still need
            # a release because a private package it builds against changed.
            if dep in bumped:
                undecided.append((workspace, bumped[dep]))

    return undecided


def dedupe_dependents(pairs: Iterable[tuple[Workspace, Workspace]]) -> list[Workspace]:
    """Return the dependents of `pairs`, each once, in order of first appearance."""
    seen: dict[str, Workspace] = {}
    for dependent, _ in pairs:
        seen.setdefault(dependent.name, dependent)
    return list(seen.values())
