"""Tests for link, link-all, and rename commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from chronolinker.cli import cli
from tests.conftest import read_frontmatter, write_doc


class TestLinkCommand:
    def test_link(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        write_doc(configured_vault, "Journal/2024-01-01.md")
        write_doc(configured_vault, "Journal/2024-01-02.md")

        result = cli_runner.invoke(cli, ["link", "Journal/2024-01-02.md"])

        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert read_frontmatter(configured_vault, "Journal/2024-01-02.md")["day-before"] == (
            "[[Journal/2024-01-01|2024-01-01]]"
        )

    def test_link_json(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        write_doc(configured_vault, "Journal/2024-01-02.md")
        write_doc(configured_vault, "Journal/2024-01-03.md")

        result = cli_runner.invoke(cli, ["--json", "link", "Journal/2024-01-02.md"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["after"] == "[[Journal/2024-01-03|2024-01-03]]"
        assert data["data"]["before"] is None

    def test_absolute_path(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        write_doc(configured_vault, "Journal/2024-01-02.md")
        target = configured_vault / "Journal" / "2024-01-02.md"

        result = cli_runner.invoke(cli, ["-q", "link", str(target)])

        assert result.exit_code == 0
        assert result.output.strip() == "Journal/2024-01-02.md"

    def test_no_stream(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        write_doc(configured_vault, "Inbox/idea.md")
        result = cli_runner.invoke(cli, ["link", "Inbox/idea.md"])
        assert result.exit_code == 1
        assert "NO_STREAM" in result.output

    def test_missing_document(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "link", "Journal/2024-01-02.md"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "NOT_FOUND"

    def test_outside_vault(
        self,
        cli_runner: CliRunner,
        configured_vault: Path,
        tmp_path_factory: pytest.TempPathFactory,
    ) -> None:
        outside = tmp_path_factory.mktemp("elsewhere") / "2024-01-02.md"
        outside.write_text("")
        result = cli_runner.invoke(cli, ["link", str(outside)])
        assert result.exit_code == 2
        assert "outside the vault" in result.output


class TestLinkAllCommand:
    def test_all_streams(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        for day in ("01", "02", "03"):
            write_doc(configured_vault, f"Journal/2024-01-{day}.md")
        write_doc(configured_vault, "Months/2024-01.md")
        write_doc(configured_vault, "Months/2024-02.md")

        result = cli_runner.invoke(cli, ["--json", "link-all"])

        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["processed"] == 5
        assert data["updated"] == 5
        assert [s["stream"] for s in data["streams"]] == ["daily", "monthly"]
        assert read_frontmatter(configured_vault, "Months/2024-02.md")["month-before"] == (
            "[[Months/2024-01|2024-01]]"
        )

    def test_one_stream(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        write_doc(configured_vault, "Journal/2024-01-01.md")
        write_doc(configured_vault, "Months/2024-01.md")
        write_doc(configured_vault, "Months/2024-02.md")

        result = cli_runner.invoke(cli, ["link-all", "--stream", "monthly"])

        assert result.exit_code == 0
        assert "processed: 2" in result.output

    def test_unknown_stream(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        result = cli_runner.invoke(cli, ["link-all", "--stream", "yearly"])
        assert result.exit_code == 1
        assert "NO_STREAM" in result.output


class TestRenameCommand:
    def test_rename_repoints_neighbours(
        self, cli_runner: CliRunner, configured_vault: Path
    ) -> None:
        for day in ("01", "02", "03"):
            write_doc(configured_vault, f"Journal/2024-01-{day}.md")
        assert cli_runner.invoke(cli, ["link-all", "--stream", "daily"]).exit_code == 0

        result = cli_runner.invoke(
            cli, ["--json", "rename", "Journal/2024-01-02.md", "Journal/2024-01-02b.md"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert sorted(data["updated"]) == ["Journal/2024-01-01.md", "Journal/2024-01-03.md"]
        assert read_frontmatter(configured_vault, "Journal/2024-01-03.md")["day-before"] == (
            "[[Journal/2024-01-02b|2024-01-02b]]"
        )

    def test_rename_onto_existing(self, cli_runner: CliRunner, configured_vault: Path) -> None:
        write_doc(configured_vault, "Journal/2024-01-01.md")
        write_doc(configured_vault, "Journal/2024-01-02.md")
        result = cli_runner.invoke(
            cli, ["rename", "Journal/2024-01-01.md", "Journal/2024-01-02.md"]
        )
        assert result.exit_code == 1
        assert "ALREADY_EXISTS" in result.output
