"""Tests for the root chronolinker CLI."""

import pytest
from click.testing import CliRunner

from chronolinker import __version__
from chronolinker.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "chronolinker" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.usefixtures("_isolated_vault")
def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json", "--sync"])
def test_global_flags_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--examples"], ["chronolinker link-all"]),
    (["streams", "--examples"], ["chronolinker streams"]),
    (["resolve", "--examples"], ["chronolinker resolve"]),
    (["link", "--examples"], ["chronolinker link Journal/2024-01-05.md"]),
    (["link-all", "--examples"], ["--stream daily"]),
    (["rename", "--examples"], ["chronolinker rename"]),
    (["create", "--examples"], ["chronolinker create daily 2024-01-05"]),
    (["next", "--examples"], ["--create"]),
    (["prev", "--examples"], ["chronolinker prev"]),
    (["belong", "--examples"], ["chronolinker belong"]),
    (["refresh", "--examples"], ["--stream daily"]),
]


@pytest.mark.usefixtures("_isolated_vault")
@pytest.mark.parametrize(("args", "keywords"), EXAMPLES_COMMANDS)
def test_examples(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert "Examples for" in result.output
    for keyword in keywords:
        assert keyword in result.output
