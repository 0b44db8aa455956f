"""Tests for bump_check.shell."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from bump_check.shell import fatal, git, git_show, git_succeeds, step


@patch("bump_check.shell.subprocess.run")
def test_git_strips_output(mock_run: MagicMock) -> None:
    mock_run.return_value = subprocess.CompletedProcess([], 0, stdout="abc\n")

    assert git("rev-parse", "HEAD") == "abc"
    mock_run.assert_called_once_with(
        ["git", "rev-parse", "HEAD"],
        cwd=None,
        capture_output=True,
        text=True,
        check=True,
    )


@patch("bump_check.shell.subprocess.run")
def test_git_succeeds_reports_exit_status(mock_run: MagicMock) -> None:
    mock_run.return_value = subprocess.CompletedProcess([], 1)
    assert git_succeeds("merge-base", "master", "HEAD") is False


@patch("bump_check.shell.subprocess.run")
def test_git_show_keeps_content(mock_run: MagicMock) -> None:
    mock_run.return_value = subprocess.CompletedProcess([], 0, stdout="a = 1\n")
    assert git_show("abc", "pyproject.toml") == "a = 1\n"


@patch("bump_check.shell.subprocess.run")
def test_git_show_missing_file(mock_run: MagicMock) -> None:
    mock_run.return_value = subprocess.CompletedProcess([], 128, stdout="")
    assert git_show("abc", "pyproject.toml") is None


def test_step_prints_header(capsys: pytest.CaptureFixture[str]) -> None:
    step("Discovering")
    assert "Discovering" in capsys.readouterr().out


def test_fatal_exits(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        fatal("boom")
    assert excinfo.value.code == 1
    assert "ERROR: boom" in capsys.readouterr().err
