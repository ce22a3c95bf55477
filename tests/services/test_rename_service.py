"""Tests for rename propagation and LinkService.rename_document."""

from __future__ import annotations

from pathlib import Path

import pytest

from chronolinker.domain.streams import Stream
from chronolinker.infrastructure.store import Document
from chronolinker.infrastructure.vault import Vault
from chronolinker.services.links import LinkService
from tests.conftest import VaultFactory, read_frontmatter, write_doc

STREAM = Stream(id="daily", folder_path="J", note_type="day")


@pytest.fixture
def linked_week(make_vault: VaultFactory, vault_root: Path) -> Vault:
    """Three consecutive, fully linked daily documents under ``J/``."""
    vault = make_vault(STREAM)
    for day in ("01", "02", "03"):
        write_doc(vault_root, f"J/2024-01-{day}.md", "---\nmood: ok\n---\nbody\n")
    LinkService(vault).update_stream_links(STREAM)
    return vault


class TestRenameDocument:
    def test_neighbours_follow_the_new_name(self, linked_week: Vault, vault_root: Path) -> None:
        result = LinkService(linked_week).rename_document(
            "J/2024-01-02.md", "J/2024-01-02b.md", [STREAM]
        )

        assert result.ok, result.error
        assert sorted(result.data["updated"]) == ["J/2024-01-01.md", "J/2024-01-03.md"]
        assert result.data["stream"] is None
        assert read_frontmatter(vault_root, "J/2024-01-01.md")["day-after"] == (
            "[[J/2024-01-02b|2024-01-02b]]"
        )
        assert read_frontmatter(vault_root, "J/2024-01-03.md")["day-before"] == (
            "[[J/2024-01-02b|2024-01-02b]]"
        )
        assert read_frontmatter(vault_root, "J/2024-01-01.md")["mood"] == "ok"
        assert not (vault_root / "J/2024-01-02.md").exists()

    def test_move_into_subfolder_keeps_stream(self, linked_week: Vault, vault_root: Path) -> None:
        result = LinkService(linked_week).rename_document(
            "J/2024-01-02.md", "J/2024/2024-01-02.md", [STREAM]
        )

        assert result.data["stream"] == "daily"
        assert read_frontmatter(vault_root, "J/2024-01-01.md")["day-after"] == (
            "[[J/2024/2024-01-02|2024-01-02]]"
        )
        moved = read_frontmatter(vault_root, "J/2024/2024-01-02.md")
        assert moved["day-before"] == "[[J/2024-01-01|2024-01-01]]"

    def test_missing_source(self, vault: Vault, daily: Stream) -> None:
        result = LinkService(vault).rename_document(
            "Journal/2024-01-02.md", "Journal/x.md", [daily]
        )
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_occupied_target(self, vault: Vault, vault_root: Path, daily: Stream) -> None:
        write_doc(vault_root, "Journal/2024-01-02.md", "a")
        write_doc(vault_root, "Journal/2024-01-03.md", "b")
        result = LinkService(vault).rename_document(
            "Journal/2024-01-02.md", "Journal/2024-01-03.md", [daily]
        )
        assert result.error is not None
        assert result.error.code == "ALREADY_EXISTS"
        assert (vault_root / "Journal/2024-01-02.md").read_text(encoding="utf-8") == "a"


class TestPropagateRename:
    def test_bare_basename_references_are_retargeted(
        self, make_vault: VaultFactory, vault_root: Path
    ) -> None:
        vault = make_vault(STREAM)
        write_doc(vault_root, "J/2024-01-01.md", "---\nday-after: '[[2024-01-02]]'\n---\n")
        write_doc(vault_root, "J/2024-01-05.md")

        result = LinkService(vault).propagate_rename(
            Document("J/2024-01-05.md"), "J/2024-01-02.md", [STREAM]
        )

        assert result.data["updated"] == ["J/2024-01-01.md"]
        assert read_frontmatter(vault_root, "J/2024-01-01.md")["day-after"] == (
            "[[J/2024-01-05|2024-01-05]]"
        )

    def test_only_link_fields_are_rewritten(
        self, make_vault: VaultFactory, vault_root: Path
    ) -> None:
        vault = make_vault(STREAM)
        write_doc(vault_root, "J/2024-01-01.md", "---\nsee: '[[J/2024-01-02|2024-01-02]]'\n---\n")
        write_doc(vault_root, "J/2024-01-05.md")

        result = LinkService(vault).propagate_rename(
            Document("J/2024-01-05.md"), "J/2024-01-02.md", [STREAM]
        )

        assert result.data["updated"] == []
        assert read_frontmatter(vault_root, "J/2024-01-01.md")["see"] == (
            "[[J/2024-01-02|2024-01-02]]"
        )

    def test_streams_outside_old_folder_are_ignored(
        self, make_vault: VaultFactory, vault_root: Path
    ) -> None:
        other = Stream(id="other", folder_path="O")
        vault = make_vault(STREAM, other)
        write_doc(vault_root, "O/2024-01-01.md", "---\nday-after: '[[J/2024-01-02|x]]'\n---\n")
        write_doc(vault_root, "J/2024-01-05.md")

        result = LinkService(vault).propagate_rename(
            Document("J/2024-01-05.md"), "J/2024-01-02.md", [STREAM, other]
        )

        assert result.data["streams"] == ["daily"]
        assert read_frontmatter(vault_root, "O/2024-01-01.md")["day-after"] == (
            "[[J/2024-01-02|x]]"
        )
