"""Data models for bump-check.

These Pydantic models represent the workspace snapshot loaded once per run
and the results computed from it.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class Decision(str, Enum):
    """A release decision recorded for a workspace."""

    UNDECIDED = "undecided"
    DECLINE = "decline"
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRERELEASE = "prerelease"


class NextVersion(BaseModel):
    """The decision record stored in a workspace manifest.

    Attributes:
        nonce: Opaque token rewritten every time a decision is recorded. Only
               compared for equality.
        version: Version the package will be released at. Equal to the
                 current version when the bump was declined.
    """

    nonce: str | None = None
    version: str | None = None


class Workspace(BaseModel):
    """A single package of the monorepo workspace.

    Attributes:
        name: Canonical package name, unique within the workspace.
        path: Relative path from the repository root to the package directory.
        version: Current version from pyproject.toml, or None if the package
                 isn't independently versioned.
        private: Whether the package is never published.
        deps: Names of the internal (workspace) packages it depends on.
        next_version: Decision record from the working tree manifest.
    """

    name: str
    path: str
    version: str | None = None
    private: bool = False
    deps: list[str] = Field(default_factory=list)
    next_version: NextVersion | None = None


class Status(BaseModel):
    """Classification of the workspaces touched by a change.

    Every versioned workspace with a changed file is in exactly one list.
    """

    decided: list[Workspace] = Field(default_factory=list)
    undecided: list[Workspace] = Field(default_factory=list)
    declined: list[Workspace] = Field(default_factory=list)


class BaseRevision(BaseModel):
    """The revision a change set is compared against."""

    hash: str
    message: str

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


class ChangeSet(BaseModel):
    """Files changed in the repository since the baseline revision."""

    root: Path
    base: BaseRevision
    files: list[Path] = Field(default_factory=list)


class Row(BaseModel):
    """One workspace line of the interactive session."""

    key: str
    workspace: Workspace
    dependent: bool = False


class VersionBump(BaseModel):
    """Records a version change applied to a workspace.

    Attributes:
        old: The version before applying the decision.
        new: The version after applying the decision.
    """

    old: str
    new: str
