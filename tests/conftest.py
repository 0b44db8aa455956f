"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
import tomlkit

from bump_check.models import NextVersion, Workspace


def make_workspace(
    name: str,
    version: str | None = "1.0.0",
    deps: list[str] | None = None,
    *,
    private: bool = False,
    next_version: NextVersion | None = None,
) -> Workspace:
    """Build a workspace living under packages/<name>."""
    return Workspace(
        name=name,
        path=f"packages/{name}",
        version=version,
        private=private,
        deps=deps or [],
        next_version=next_version,
    )


def graph(*workspaces: Workspace) -> dict[str, Workspace]:
    return {ws.name: ws for ws in workspaces}


def write_package(root: Path, name: str, body: str = "") -> Path:
    """Write packages/<name>/pyproject.toml and return the package directory."""
    package_dir = root / "packages" / name
    package_dir.mkdir(parents=True, exist_ok=True)
    (package_dir / "pyproject.toml").write_text(f'[project]\nname = "{name}"\n{body}')
    return package_dir


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file."""
    content = """\
[project]
name = "test-package"
version = "1.0.0"
dependencies = [
    "requests>=2.0",
    "internal-dep>=1.0",
]

[project.optional-dependencies]
dev = ["pytest>=8.0", "another-internal>=0.5"]

[dependency-groups]
test = ["pytest>=8.0", "group-internal>=0.1"]
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


@pytest.fixture
def sample_toml_doc() -> tomlkit.TOMLDocument:
    """Create a sample TOML document."""
    content = """\
[project]
name = "my-package"
version = "2.0.0"
dependencies = ["click>=8.0", "pydantic>=2.0"]

[project.optional-dependencies]
dev = ["pytest>=8.0"]
docs = ["sphinx>=7.0"]

[dependency-groups]
test = ["hypothesis>=6.0"]

[tool.uv.workspace]
members = ["packages/*", "libs/*"]
"""
    return tomlkit.parse(content)


@pytest.fixture
def workspace_repo(tmp_path: Path) -> Path:
    """A uv workspace with three packages: pkg-c → pkg-b → pkg-a."""
    (tmp_path / ".git").mkdir()
    (tmp_path / "pyproject.toml").write_text(
        '[tool.uv.workspace]\nmembers = ["packages/*"]\n'
    )
    write_package(tmp_path, "pkg-a", 'version = "1.0.0"\n')
    write_package(
        tmp_path,
        "pkg-b",
        'version = "2.0.0"\ndependencies = ["pkg-a>=1.0", "requests"]\n',
    )
    write_package(
        tmp_path,
        "pkg-c",
        'version = "0.1.0"\ndependencies = ["pkg_B"]\n'
        'classifiers = ["Private :: Do Not Upload"]\n',
    )
    return tmp_path
