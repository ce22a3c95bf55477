"""Pluggy hook specifications for store change notifications.

The document store emits one notification per create, metadata/body
modification, and rename. Paths are vault-relative POSIX paths.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("chronolinker")


class ChronolinkerHookSpec:
    """Hook specifications for the chronolinker plugin system."""

    @hookspec
    def post_create(self, path: str) -> None:
        """Called after a document is created."""

    @hookspec
    def post_modify(self, path: str) -> None:
        """Called after a document's frontmatter or body is rewritten."""

    @hookspec
    def post_rename(self, path: str, old_path: str) -> None:
        """Called after a document moves from *old_path* to *path*."""
