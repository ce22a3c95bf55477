"""Tests for Jinja2 skeleton rendering."""

from __future__ import annotations

from pathlib import Path

from chronolinker.infrastructure.templates import BELONGING_SKELETON, render_skeleton


class TestRenderSkeleton:
    def test_packaged_default(self) -> None:
        text = render_skeleton(
            BELONGING_SKELETON,
            title="2024-W01",
            stream="Daily",
            start="2024-01-01",
            end="2024-01-07",
        )
        assert text == "# 2024-W01\n\nDaily: 2024-01-01 to 2024-01-07\n"

    def test_vault_override(self, tmp_path: Path) -> None:
        override = tmp_path / ".chronolinker" / "templates" / "belonging"
        override.mkdir(parents=True)
        (override / BELONGING_SKELETON).write_text("Week {{ title }}\n", encoding="utf-8")
        text = render_skeleton(
            BELONGING_SKELETON, vault_root=tmp_path, title="2024-W01", stream="", start="", end=""
        )
        assert text == "Week 2024-W01\n"

    def test_vault_without_override_uses_default(self, tmp_path: Path) -> None:
        text = render_skeleton(
            BELONGING_SKELETON, vault_root=tmp_path, title="T", stream="S", start="a", end="b"
        )
        assert text.startswith("# T\n")
