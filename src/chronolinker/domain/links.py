"""Wikilink references stored in frontmatter link fields.

Pure functions, no infrastructure dependencies. A reference encodes the
target's vault path (extension stripped) and a display label::

    [[Journal/2024-01-05|2024-01-05]]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

# [[Target]] or [[Target|Label]]
_WIKILINK_PATTERN = re.compile(r"\[\[([^\[\]]+)\]\]")

DOCUMENT_SUFFIX = ".md"


@dataclass(frozen=True)
class WikiLink:
    """A parsed reference."""

    target: str  # vault path without extension, or a bare basename
    label: str | None = None

    @property
    def basename(self) -> str:
        return PurePosixPath(self.target).name


def strip_suffix(path: str) -> str:
    """Drop the ``.md`` extension from a vault path."""
    if path.endswith(DOCUMENT_SUFFIX):
        return path[: -len(DOCUMENT_SUFFIX)]
    return path


def format_reference(path: str, label: str) -> str:
    """Render a reference to the document at *path*. Deterministic per pair."""
    return f"[[{strip_suffix(path)}|{label}]]"


def parse_reference(value: object) -> WikiLink | None:
    """Parse a single reference string. Returns None for anything else."""
    if not isinstance(value, str):
        return None
    match = _WIKILINK_PATTERN.fullmatch(value.strip())
    if match is None:
        return None
    target, _, label = match.group(1).partition("|")
    return WikiLink(target=target.strip(), label=label.strip() or None)


def references_document(value: object, path: str) -> bool:
    """True if *value* is a reference to the document at *path*.

    Matches either the full extension-less path or, for references
    written as ``[[basename]]``, the bare basename.
    """
    link = parse_reference(value)
    if link is None:
        return False
    stem = strip_suffix(path)
    if link.target == stem:
        return True
    return "/" not in link.target and link.target == PurePosixPath(stem).name


def retarget_reference(value: str, old_path: str, new_path: str) -> str:
    """Rewrite *value* to point at *new_path* if it referenced *old_path*.

    The label follows the new basename. Values that do not reference
    *old_path* are returned unchanged.
    """
    if not references_document(value, old_path):
        return value
    return format_reference(new_path, PurePosixPath(strip_suffix(new_path)).name)
