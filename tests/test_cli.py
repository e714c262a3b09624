# tests/test_cli.py
"""
Tests for the unistate command-line interface (CLI).

Scope
-----
1.  **Command Registration**: `demo`, `run` and `--help` work.
2.  **Argument Validation**: Typer's `exists=True` check for the script file.
3.  **Store Integration**: actions from a script are parsed and dispatched.
4.  **Error Handling**: unknown actions and malformed scripts exit with code 1.

We use `typer.testing.CliRunner` to invoke the app in-process.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from unistate.cli import app


@pytest.fixture  # type: ignore[misc]
def runner() -> CliRunner:
    """Create a fresh CliRunner for each test."""
    return CliRunner()


def _script(tmp_path: Path, actions: Any) -> Path:
    path = tmp_path / "actions.json"
    path.write_text(json.dumps(actions), encoding="utf-8")
    return path


def test_cli_help_shows_usage(runner: CliRunner) -> None:
    """Invoking --help should print usage instructions and exit 0."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0, f"Help failed: {result.output}"
    assert "demo" in result.output
    assert "run" in result.output


def test_demo_runs_every_scenario(runner: CliRunner) -> None:
    """The demo survives the unknown action and the broken subscriber."""
    result = runner.invoke(app, ["demo", "--diff"])

    assert result.exit_code == 0, f"Demo failed:\n{result.output}"
    assert "Buy milk" in result.output
    assert "NOT_A_REAL_ACTION" in result.output
    assert "view crashed" in result.output
    assert "saw 1 update(s)" in result.output
    assert "History" in result.output


def test_run_dispatches_script(runner: CliRunner, tmp_path: Path) -> None:
    script = _script(
        tmp_path,
        [
            {"name": "ADD_TODO", "payload": "Buy milk"},
            {"name": "COMPLETE_TODO", "payload": {"index": 0}},
            {"name": "REMOVE_TODO", "payload": {"index": 0}},
        ],
    )
    result = runner.invoke(app, ["run", str(script), "--history"])

    assert result.exit_code == 0, f"CLI Failed with Output:\n{result.output}"
    assert "Complete!" in result.output
    assert "revision 3" in result.output
    assert "Buy milk" in result.output
    assert "(initial)" in result.output  # first row of the history table


def test_run_fails_on_missing_file(runner: CliRunner) -> None:
    """Typer should enforce `exists=True` for the script argument."""
    result = runner.invoke(app, ["run", "ghost.json"])
    assert result.exit_code != 0
    assert "does not exist" in result.output


def test_run_stops_at_unknown_action(runner: CliRunner, tmp_path: Path) -> None:
    script = _script(
        tmp_path,
        [
            {"name": "ADD_TODO", "payload": "kept"},
            {"name": "NOT_A_REAL_ACTION", "payload": None},
            {"name": "ADD_TODO", "payload": "never dispatched"},
        ],
    )
    result = runner.invoke(app, ["run", str(script)])

    assert result.exit_code == 1, f"Expected failure (1), got {result.exit_code}:\n{result.output}"
    assert "Dispatch Error" in result.output
    assert "NOT_A_REAL_ACTION" in result.output
    assert "kept" in result.output
    assert "never dispatched" not in result.output


def test_run_rejects_malformed_script(runner: CliRunner, tmp_path: Path) -> None:
    script = _script(tmp_path, [{"name": "REMOVE_TODO", "payload": {"index": -1}}])
    result = runner.invoke(app, ["run", str(script)])

    assert result.exit_code == 1
    assert "Script Error" in result.output


def test_run_rejects_non_array_script(runner: CliRunner, tmp_path: Path) -> None:
    script = _script(tmp_path, {"name": "ADD_TODO"})
    result = runner.invoke(app, ["run", str(script)])

    assert result.exit_code == 1
    assert "JSON array" in result.output
