"""BaseService — shared foundation for the engine services.

Every service receives a :class:`Vault` at construction time and holds no
other state: streams are passed in per call, and the store is consulted
afresh on every operation.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from chronolinker.domain.links import DOCUMENT_SUFFIX
from chronolinker.domain.periods import child_range, format_date
from chronolinker.domain.streams import in_folder, join_path
from chronolinker.domain.templating import render_template
from chronolinker.domain.types import EntryKind
from chronolinker.infrastructure.store import Document, Mutator, StoreIOError
from chronolinker.infrastructure.templates import BELONGING_SKELETON, render_skeleton
from chronolinker.services.result import STORE_IO_ERROR, ServiceResult

if TYPE_CHECKING:
    from chronolinker.domain.streams import Stream
    from chronolinker.infrastructure.vault import Vault

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class LinkService(BaseService):
            def update_links(self, document, stream) -> ServiceResult:
                ...
                changed = self._patch(document, mutator)
    """

    def __init__(self, vault: Vault) -> None:
        self._vault = vault

    # ------------------------------------------------------------------
    # Store helpers
    # ------------------------------------------------------------------

    def _patch(self, document: Document, mutator: Mutator) -> bool:
        """Rewrite *document*'s frontmatter while holding it in the update guard."""
        with self._vault.guard.hold(document.path):
            return self._vault.store.mutate_metadata(document, mutator)

    def _find_document(self, name: str, folder: str) -> Document | None:
        """Locate the document named *name* anywhere under *folder*.

        The expected path ``folder/name.md`` wins; otherwise the first
        match in sorted listing order.
        """
        store = self._vault.store
        expected = join_path(folder, f"{name}{DOCUMENT_SUFFIX}")
        entry = store.lookup(expected)
        if entry.kind is EntryKind.DOCUMENT:
            return entry.document
        for document in store.list_documents():
            if document.basename == name and in_folder(document.path, folder):
                return document
        return None

    def _read_template(self, template_path: str, warnings: list[str]) -> str | None:
        store = self._vault.store
        candidates = [template_path]
        if not template_path.endswith(DOCUMENT_SUFFIX):
            candidates.append(f"{template_path}{DOCUMENT_SUFFIX}")
        for candidate in candidates:
            entry = store.lookup(candidate)
            if entry.kind is EntryKind.DOCUMENT:
                return store.read_text(Document(entry.path))
        warnings.append(f"Template not found: {template_path}")
        return None

    def _initial_body(
        self,
        stream: Stream,
        period: date,
        warnings: list[str],
        *,
        belonging: bool = False,
    ) -> str:
        """Body for a newly created document of *stream* at *period*.

        A configured template is rendered with the stream's tokens. Without
        one, ordinary documents start empty and belonging documents start
        from the packaged skeleton.
        """
        if stream.template_path:
            template = self._read_template(stream.template_path, warnings)
            if template is not None:
                return render_template(template, period, stream, belonging=belonging)
        if not belonging:
            return ""

        title = format_date(period, stream.belonging_note_date_format)
        span = child_range(period, stream.belonging_note_type)
        start = format_date(span.start, stream.date_format) if span else title
        end = format_date(span.end, stream.date_format) if span else title
        return render_skeleton(
            BELONGING_SKELETON,
            vault_root=self._vault.root,
            title=title,
            stream=stream.display_name,
            start=start,
            end=end,
        )

    @staticmethod
    def _store_failure(op: str, exc: StoreIOError) -> ServiceResult:
        logger.warning("%s failed: %s", op, exc)
        return ServiceResult.failure(op, STORE_IO_ERROR, str(exc), path=exc.path)
