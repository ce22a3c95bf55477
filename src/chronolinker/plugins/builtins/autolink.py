"""Built-in plugin that keeps links current as documents change.

On create: link the new document, relink its neighbours, and upsert its
belonging document. On modify: relink the document. On rename: point
existing references at the new path.

Only streams with ``auto_linking`` are handled. Modify and rename
notifications for documents held by the update guard are skipped so the
engine's own writes do not re-trigger it. A creation is never an echo of
a metadata write, so ``post_create`` does not consult the guard.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pluggy

from chronolinker.domain.streams import Stream, resolve_stream
from chronolinker.infrastructure.store import Document

if TYPE_CHECKING:
    from chronolinker.infrastructure.vault import Vault

hookimpl = pluggy.HookimplMarker("chronolinker")

logger = logging.getLogger(__name__)


class AutoLinkPlugin:
    """Reacts to store notifications with the matching engine operation."""

    def __init__(self, vault: Vault) -> None:
        self._vault = vault

    def _target(self, path: str) -> tuple[Document, Stream] | None:
        document = Document(path)
        stream = resolve_stream(document.path, document.basename, self._vault.streams)
        if stream is None or not stream.auto_linking:
            return None
        return document, stream

    @hookimpl
    def post_create(self, path: str) -> None:
        from chronolinker.services.belonging import BelongingService
        from chronolinker.services.links import LinkService

        target = self._target(path)
        if target is None:
            return
        document, stream = target
        links = LinkService(self._vault)
        links.update_links(document, stream)
        links.update_neighbors(document, stream)
        if stream.enable_belonging_notes:
            BelongingService(self._vault).upsert_belonging_document(document, stream)

    @hookimpl
    def post_modify(self, path: str) -> None:
        from chronolinker.services.links import LinkService

        if self._vault.guard.is_busy(path):
            logger.debug("Skipping %s: update in progress", path)
            return
        target = self._target(path)
        if target is None:
            return
        document, stream = target
        LinkService(self._vault).update_links(document, stream)

    @hookimpl
    def post_rename(self, path: str, old_path: str) -> None:
        from chronolinker.services.links import LinkService

        if self._vault.guard.is_busy(path):
            logger.debug("Skipping rename of %s: update in progress", old_path)
            return
        streams = [s for s in self._vault.streams if s.auto_linking]
        LinkService(self._vault).propagate_rename(Document(path), old_path, streams)
