"""Every command and group answers --examples and --help."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from campusctl.cli import cli

COMMAND_PATHS = [
    ["init"],
    ["check"],
    ["route"],
    ["snap"],
    ["search"],
    ["layers"],
    ["node"],
    ["node", "add"],
    ["node", "update"],
    ["node", "delete"],
    ["node", "list"],
    ["edge"],
    ["edge", "add"],
    ["edge", "update"],
    ["edge", "delete"],
    ["space"],
    ["space", "add"],
    ["space", "update"],
    ["space", "delete"],
    ["building"],
    ["building", "add"],
    ["building", "delete"],
    ["floor"],
    ["floor", "add"],
    ["floor", "delete"],
    ["floor", "link"],
    ["door"],
    ["door", "place"],
    ["door", "remove"],
]


@pytest.mark.usefixtures("_isolated_project")
class TestExamples:
    @pytest.mark.parametrize("path", COMMAND_PATHS, ids=" ".join)
    def test_examples(self, cli_runner: CliRunner, path: list[str]) -> None:
        result = cli_runner.invoke(cli, [*path, "--examples"])
        assert result.exit_code == 0, result.output
        assert "Examples for" in result.output
        assert "campusctl" in result.output

    @pytest.mark.parametrize("path", COMMAND_PATHS, ids=" ".join)
    def test_help_lists_examples_flag(self, cli_runner: CliRunner, path: list[str]) -> None:
        result = cli_runner.invoke(cli, [*path, "--help"])
        assert result.exit_code == 0
        assert "--examples" in result.output

    def test_examples_do_not_touch_document(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        cli_runner.invoke(cli, ["init", "--examples"])
        assert not (tmp_path / "campus.json").exists()
