"""Tests for the root CLI group and its global flags."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from campusctl import __version__
from campusctl.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestRootGroup:
    def test_no_args_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "campus map graph editor and router" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert f"campusctl, version {__version__}" in result.output

    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        for name in ("node", "edge", "space", "building", "floor", "door", "route", "check"):
            assert name in result.output

    def test_unknown_command(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["teleport"])
        assert result.exit_code == 2


@pytest.mark.usefixtures("_isolated_project")
class TestGlobalFlags:
    def test_json_envelope(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "node", "add", "--id", "n1"])
        payload = json.loads(result.stdout)
        assert payload["ok"] is True
        assert payload["op"] == "add_node"
        assert payload["data"]["id"] == "n1"

    def test_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "node", "add", "--id", "n1"])
        assert result.stdout.strip() == "n1"
        assert result.stderr == ""

    def test_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["node", "add", "--id", "n1"])
        assert "OK" in result.stdout
        assert "add_node" in result.stdout
        assert "invalid (1 errors, 0 warnings)" in result.stdout
        assert "WARNING: 1 validation error(s) in campus.json" in result.stderr

    def test_failure_goes_to_stderr(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["node", "delete", "ghost"])
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "ERROR" in result.stderr
        assert "[NotFound]" in result.stderr

    def test_quiet_failure(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "node", "delete", "ghost"])
        assert result.stderr.startswith("ERROR: delete_node:")

    def test_verbose_adds_telemetry(self, cli_runner: CliRunner) -> None:
        from campusctl.services.telemetry import disable_telemetry

        try:
            result = cli_runner.invoke(cli, ["-v", "--json", "node", "add", "--id", "n1"])
        finally:
            disable_telemetry()
        payload = json.loads(result.stdout)
        assert payload["meta"]["telemetry"]["name"] == "EditorService.add_node"

    def test_file_flag(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        cli_runner.invoke(cli, ["-f", "other.json", "node", "add", "--id", "n1"])
        assert (tmp_path / "other.json").is_file()
        assert not (tmp_path / "campus.json").exists()

    def test_config_flag(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "conf" / "alt.toml"
        config.parent.mkdir()
        config.write_text('[document]\nfilename = "alt.json"\n')
        result = cli_runner.invoke(cli, ["-c", str(config), "node", "add", "--id", "n1"])
        assert result.exit_code == 0
        assert (tmp_path / "conf" / "alt.json").is_file()
