"""Tests for wikilink reference helpers."""

from __future__ import annotations

import pytest

from chronolinker.domain.links import (
    WikiLink,
    format_reference,
    parse_reference,
    references_document,
    retarget_reference,
    strip_suffix,
)


class TestFormatReference:
    def test_strips_extension(self) -> None:
        assert format_reference("Journal/2024-01-05.md", "2024-01-05") == (
            "[[Journal/2024-01-05|2024-01-05]]"
        )

    def test_round_trips_through_parse(self) -> None:
        ref = format_reference("Journal/2024/2024-01-05.md", "2024-01-05")
        assert parse_reference(ref) == WikiLink(
            target="Journal/2024/2024-01-05", label="2024-01-05"
        )

    def test_strip_suffix_leaves_other_names(self) -> None:
        assert strip_suffix("Journal/notes.txt") == "Journal/notes.txt"


class TestParseReference:
    def test_without_label(self) -> None:
        link = parse_reference("[[2024-01-05]]")
        assert link == WikiLink(target="2024-01-05")
        assert link is not None and link.basename == "2024-01-05"

    @pytest.mark.parametrize("value", [None, 42, "", "2024-01-05", "[[a]] and [[b]]", "[[]]"])
    def test_rejects_non_references(self, value: object) -> None:
        assert parse_reference(value) is None


class TestReferencesDocument:
    def test_full_path(self) -> None:
        assert references_document("[[Journal/2024-01-05|x]]", "Journal/2024-01-05.md")

    def test_bare_basename(self) -> None:
        assert references_document("[[2024-01-05]]", "Journal/2024-01-05.md")

    def test_other_folder_does_not_match(self) -> None:
        assert not references_document("[[Archive/2024-01-05]]", "Journal/2024-01-05.md")

    def test_non_reference(self) -> None:
        assert not references_document("Journal/2024-01-05", "Journal/2024-01-05.md")


class TestRetargetReference:
    def test_rewrites_matching_reference(self) -> None:
        value = "[[Journal/2024-01-05|2024-01-05]]"
        assert retarget_reference(value, "Journal/2024-01-05.md", "Journal/2024-01-05-x.md") == (
            "[[Journal/2024-01-05-x|2024-01-05-x]]"
        )

    def test_leaves_other_references(self) -> None:
        value = "[[Journal/2024-01-06|2024-01-06]]"
        assert retarget_reference(value, "Journal/2024-01-05.md", "Journal/x.md") == value
