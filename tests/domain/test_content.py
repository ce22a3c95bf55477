"""Tests for frontmatter parsing and rendering."""

from __future__ import annotations

import pytest

from chronolinker.domain.content import (
    FrontmatterError,
    copy_frontmatter,
    detect_newline,
    parse_frontmatter,
    render_frontmatter,
)


class TestParseFrontmatter:
    def test_splits_frontmatter_and_body(self) -> None:
        fm, body = parse_frontmatter("---\ntitle: Day\ntags: [a, b]\n---\n# Heading\n")
        assert fm["title"] == "Day"
        assert list(fm["tags"]) == ["a", "b"]
        assert body == "# Heading\n"

    def test_no_frontmatter(self) -> None:
        fm, body = parse_frontmatter("# Just a body\n")
        assert dict(fm) == {}
        assert body == "# Just a body\n"

    def test_unclosed_frontmatter_is_body(self) -> None:
        content = "---\ntitle: Day\n"
        fm, body = parse_frontmatter(content)
        assert dict(fm) == {}
        assert body == content

    def test_crlf_body_kept_verbatim(self) -> None:
        fm, body = parse_frontmatter("---\r\ntitle: Day\r\n---\r\nline one\r\nline two\r\n")
        assert fm["title"] == "Day"
        assert body == "line one\r\nline two\r\n"

    def test_empty_block(self) -> None:
        fm, body = parse_frontmatter("---\n---\nbody\n")
        assert dict(fm) == {}
        assert body == "body\n"

    @pytest.mark.parametrize("block", ["- keep\n- me", "just a string"])
    def test_non_mapping_block_rejected(self, block: str) -> None:
        with pytest.raises(FrontmatterError, match="not a mapping"):
            parse_frontmatter(f"---\n{block}\n---\nbody\n")


class TestRenderFrontmatter:
    def test_preserves_key_order_and_comments(self) -> None:
        content = "---\nzeta: 1  # keep me\nalpha: 2\n---\nbody\n"
        fm, body = parse_frontmatter(content)
        fm["middle"] = "[[Journal/2024-01-05|2024-01-05]]"
        rendered = render_frontmatter(fm, body)
        assert rendered.index("zeta") < rendered.index("alpha") < rendered.index("middle")
        assert "# keep me" in rendered
        assert rendered.endswith("---\nbody\n")

    def test_round_trip_is_stable(self) -> None:
        content = "---\ntitle: Day\nday-before: '[[Journal/2024-01-04|2024-01-04]]'\n---\nbody\n"
        fm, body = parse_frontmatter(content)
        assert render_frontmatter(fm, body) == content

    def test_empty_frontmatter_renders_body_only(self) -> None:
        assert render_frontmatter({}, "body\n") == "body\n"

    def test_date_like_strings_stay_strings(self) -> None:
        rendered = render_frontmatter({"range": {"start": "2024-01-01"}}, "")
        fm, _ = parse_frontmatter(rendered)
        assert fm["range"]["start"] == "2024-01-01"
        assert isinstance(fm["range"]["start"], str)


class TestCopyFrontmatter:
    def test_copy_is_independent(self) -> None:
        fm, _ = parse_frontmatter("---\nitems: [1, 2]\n---\n")
        copied = copy_frontmatter(fm)
        copied["items"].append(3)
        assert list(fm["items"]) == [1, 2]


class TestNewlines:
    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("---\r\ntitle: Day\r\n---\r\n", "\r\n"),
            ("---\ntitle: Day\n---\n", "\n"),
            ("no line break", "\n"),
        ],
    )
    def test_detect_newline(self, content: str, expected: str) -> None:
        assert detect_newline(content) == expected

    def test_render_with_crlf(self) -> None:
        rendered = render_frontmatter({"title": "Day"}, "body\r\n", "\r\n")
        assert rendered == "---\r\ntitle: Day\r\n---\r\nbody\r\n"
