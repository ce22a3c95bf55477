"""Frontmatter parsing and rendering.

Frontmatter is loaded with ruamel.yaml in round-trip mode, so key order,
comments, and quote styles survive a rewrite. Keys are never reordered:
the engine owns only a handful of fields and must leave every other key
exactly where the author put it.
"""

from __future__ import annotations

import copy
from io import StringIO
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

_FRONTMATTER_DELIMITER = "---"


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    ruamel.yaml's YAML object is stateful; a failed dump can leave a shared
    instance in a broken state, so every call gets its own.
    """
    y = YAML()
    y.preserve_quotes = True
    y.default_flow_style = False
    y.width = 4096
    return y


class FrontmatterError(ValueError):
    """The frontmatter block is valid YAML but not a mapping."""


def detect_newline(content: str) -> str:
    """Line ending of *content*'s first line: ``\\r\\n`` or ``\\n``."""
    first, sep, _ = content.partition("\n")
    return "\r\n" if sep and first.endswith("\r") else "\n"


def parse_frontmatter(content: str) -> tuple[CommentedMap, str]:
    """Split markdown *content* into ``(frontmatter, body)``.

    The text must open with ``---`` on the first line; the next ``---``
    closes the YAML block. The body is returned byte-for-byte as it
    appears in *content*, line endings included. Without valid delimiters
    the whole text is body and the frontmatter is empty.

    Raises:
        FrontmatterError: the block parses to a list or scalar.
    """
    lines = content.split("\n")
    if lines[0].strip() != _FRONTMATTER_DELIMITER:
        return CommentedMap(), content

    offset = len(lines[0]) + 1
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            yaml_block = "\n".join(raw.rstrip("\r") for raw in lines[1:i])
            body = content[offset + len(line) + 1 :]
            break
        offset += len(line) + 1
    else:
        return CommentedMap(), content

    loaded = _new_yaml().load(yaml_block)
    if loaded is None:
        return CommentedMap(), body
    if not isinstance(loaded, dict):
        msg = "frontmatter is not a mapping"
        raise FrontmatterError(msg)
    return loaded, body


def render_frontmatter(frontmatter: dict[str, Any], body: str, newline: str = "\n") -> str:
    """Render *frontmatter* and *body* back into markdown.

    Delimiters and YAML lines end with *newline*; the body is written
    unchanged. An empty mapping renders the body alone, without delimiters.
    """
    if not frontmatter:
        return body
    buf = StringIO()
    _new_yaml().dump(frontmatter, buf)
    block = f"{_FRONTMATTER_DELIMITER}\n{buf.getvalue()}{_FRONTMATTER_DELIMITER}\n"
    if newline != "\n":
        block = block.replace("\n", newline)
    return block + body


def copy_frontmatter(frontmatter: dict[str, Any]) -> CommentedMap:
    """Deep copy preserving ruamel ordering and comments."""
    if isinstance(frontmatter, CommentedMap):
        return copy.deepcopy(frontmatter)
    return CommentedMap(copy.deepcopy(dict(frontmatter)))
