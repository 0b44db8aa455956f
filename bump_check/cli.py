"""CLI entry point for bump-check."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from bump_check.check import run_check
from bump_check.deferred import apply_deferred, defer_decision
from bump_check.models import Decision
from bump_check.vcs import find_root
from bump_check.workspaces import discover_workspaces


@click.group()
@click.version_option(package_name="bump-check")
def cli() -> None:
    """Make sure every changed workspace has a release decision."""


@cli.command()
@click.option(
    "-i",
    "--interactive",
    is_flag=True,
    help="Pick the missing strategies from an interactive prompt.",
)
@click.option("-v", "--verbose", is_flag=True, help="List the discovered workspaces.")
def check(interactive: bool, verbose: bool) -> None:
    """Check that all the changed workspaces have a bump strategy.

    Should a workspace be bumped, the workspaces depending on it need a
    decision too. Workspaces that declined a bump don't propagate it.
    """
    sys.exit(run_check(Path.cwd(), interactive=interactive, verbose=verbose))


@cli.command()
@click.argument("strategy", type=click.Choice([d.value for d in Decision]))
@click.option(
    "--path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Directory of the workspace to record the decision for.",
)
def defer(strategy: str, path: Path) -> None:
    """Record a release decision without changing the version yet."""
    manifest = path / "pyproject.toml"
    if not manifest.exists():
        raise click.ClickException(f"No pyproject.toml found in {path}.")

    target = defer_decision(manifest, Decision(strategy))
    if target is None:
        click.echo(f"✓ Cleared the decision for {path}")
    else:
        click.echo(f"✓ {path} will be released as {target}")


@cli.command()
def apply() -> None:
    """Apply every deferred decision to the workspace versions."""
    root = find_root(Path.cwd())
    workspaces = discover_workspaces(root)
    apply_deferred(workspaces, root)
