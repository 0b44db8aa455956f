"""Tests for bump_check.cli."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from bump_check.cli import cli
from bump_check.toml import get_next_version, get_project_version, load_pyproject


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestCheck:
    @patch("bump_check.cli.run_check", return_value=1)
    def test_report_exit_code(self, mock_check: MagicMock, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 1
        assert mock_check.call_args.kwargs == {"interactive": False, "verbose": False}

    @patch("bump_check.cli.run_check", return_value=0)
    def test_interactive_flag(self, mock_check: MagicMock, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["check", "-i"])

        assert result.exit_code == 0
        assert mock_check.call_args.kwargs["interactive"] is True


class TestDefer:
    def test_records_decision(self, runner: CliRunner, workspace_repo: Path) -> None:
        pkg = workspace_repo / "packages" / "pkg-a"

        result = runner.invoke(cli, ["defer", "major", "--path", str(pkg)])

        assert result.exit_code == 0, result.output
        assert "will be released as 2.0.0" in result.output
        assert get_next_version(load_pyproject(pkg / "pyproject.toml"))["version"] == "2.0.0"

    def test_undecided_clears(self, runner: CliRunner, workspace_repo: Path) -> None:
        pkg = workspace_repo / "packages" / "pkg-a"
        runner.invoke(cli, ["defer", "patch", "--path", str(pkg)])

        result = runner.invoke(cli, ["defer", "undecided", "--path", str(pkg)])

        assert result.exit_code == 0
        assert "Cleared" in result.output
        assert get_next_version(load_pyproject(pkg / "pyproject.toml")) is None

    def test_unknown_strategy(self, runner: CliRunner, workspace_repo: Path) -> None:
        result = runner.invoke(cli, ["defer", "huge", "--path", str(workspace_repo)])
        assert result.exit_code == 2

    def test_missing_manifest(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["defer", "patch", "--path", str(tmp_path)])

        assert result.exit_code == 1
        assert "No pyproject.toml found" in result.output


class TestApply:
    def test_applies_deferred_versions(
        self, runner: CliRunner, workspace_repo: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        pkg = workspace_repo / "packages" / "pkg-b"
        runner.invoke(cli, ["defer", "patch", "--path", str(pkg)])
        monkeypatch.chdir(workspace_repo)

        result = runner.invoke(cli, ["apply"])

        assert result.exit_code == 0, result.output
        assert "pkg-b: 2.0.0 → 2.0.1" in result.output
        assert get_project_version(load_pyproject(pkg / "pyproject.toml")) == "2.0.1"
