"""LinkService — chronological before/after links between documents.

Each stream document carries two frontmatter link fields pointing at its
predecessor and successor in the stream. The service owns exactly those
two fields and never touches any other key or the body.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any

from chronolinker.domain.links import (
    DOCUMENT_SUFFIX,
    format_reference,
    references_document,
    retarget_reference,
)
from chronolinker.domain.periods import format_date, next_period, parse_date, previous_period
from chronolinker.domain.streams import Stream, in_folder, join_path, resolve_stream
from chronolinker.domain.types import Direction, EntryKind
from chronolinker.infrastructure.store import NO_CHANGE, Document, Metadata, Patch, StoreIOError
from chronolinker.services.base import BaseService
from chronolinker.services.result import (
    ALREADY_EXISTS,
    DATE_PARSE_ERROR,
    NOT_FOUND,
    STORE_IO_ERROR,
    ServiceResult,
)


def _parse_failure(op: str, document: Document, stream: Stream) -> ServiceResult:
    return ServiceResult.failure(
        op,
        DATE_PARSE_ERROR,
        f"{document.basename!r} does not match {stream.date_format!r}",
        path=document.path,
        stream=stream.id,
    )


class LinkService(BaseService):
    """Maintains before/after links, navigation, creation, and renames."""

    # ------------------------------------------------------------------
    # Single document
    # ------------------------------------------------------------------

    def update_links(self, document: Document, stream: Stream) -> ServiceResult:
        """Recompute *document*'s before/after fields.

        A field is recomputed only when ``overwrite_existing`` is set or the
        field is absent or empty. A recomputed field points at the neighbour
        if one exists anywhere under the stream folder and is removed
        otherwise. Nothing is written when the result is unchanged.
        """
        op = "update_links"
        period = parse_date(document.basename, stream.date_format)
        if period is None:
            return _parse_failure(op, document, stream)

        neighbours = {
            stream.before_field_name: format_date(
                previous_period(period, stream.note_type), stream.date_format
            ),
            stream.after_field_name: format_date(
                next_period(period, stream.note_type), stream.date_format
            ),
        }

        try:
            current = self._vault.store.read_metadata(document)
            targets: dict[str, str | None] = {}
            for field, name in neighbours.items():
                if current.get(field) and not stream.overwrite_existing:
                    continue
                found = self._find_document(name, stream.folder_path)
                targets[field] = format_reference(found.path, name) if found else None

            def apply(frontmatter: Metadata) -> Patch:
                changed = False
                for field, reference in targets.items():
                    if frontmatter.get(field) and not stream.overwrite_existing:
                        continue
                    if reference is None:
                        if field in frontmatter:
                            del frontmatter[field]
                            changed = True
                    elif frontmatter.get(field) != reference:
                        frontmatter[field] = reference
                        changed = True
                return frontmatter if changed else NO_CHANGE

            changed = self._patch(document, apply) if targets else False
            final = self._vault.store.read_metadata(document) if changed else current
        except StoreIOError as exc:
            return self._store_failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": document.path,
                "stream": stream.id,
                "date": period.isoformat(),
                "changed": changed,
                "before": final.get(stream.before_field_name),
                "after": final.get(stream.after_field_name),
            },
        )

    def navigate_adjacent(
        self,
        document: Document,
        stream: Stream,
        direction: Direction | str,
    ) -> ServiceResult:
        """Locate the neighbour of *document* in *direction*. Never creates."""
        op = "navigate_adjacent"
        period = parse_date(document.basename, stream.date_format)
        if period is None:
            return _parse_failure(op, document, stream)

        step = previous_period if Direction(direction) is Direction.PREVIOUS else next_period
        target = step(period, stream.note_type)
        name = format_date(target, stream.date_format)
        path = join_path(stream.folder_path, f"{name}{DOCUMENT_SUFFIX}")

        try:
            entry = self._vault.store.lookup(path)
        except StoreIOError as exc:
            return self._store_failure(op, exc)

        if entry.kind is EntryKind.DOCUMENT:
            data: dict[str, Any] = {"exists": True, "path": entry.path}
        else:
            data = {
                "exists": False,
                "needs_create": True,
                "path": path,
                "date": target.isoformat(),
            }
        data["direction"] = str(Direction(direction))
        return ServiceResult(ok=True, op=op, data=data)

    def create_document(self, stream: Stream, period: date) -> ServiceResult:
        """Create the document for *period* in *stream*, then link it."""
        op = "create_document"
        warnings: list[str] = []
        name = format_date(period, stream.date_format)
        path = join_path(stream.folder_path, f"{name}{DOCUMENT_SUFFIX}")
        store = self._vault.store

        try:
            if stream.folder_path:
                store.create_folder(stream.folder_path)
            if store.exists(path):
                return ServiceResult.failure(
                    op, ALREADY_EXISTS, f"Document already exists: {path}", path=path
                )
            body = self._initial_body(stream, period, warnings)
            document = store.create_document(path, body)
        except StoreIOError as exc:
            return self._store_failure(op, exc)

        linked = self.update_links(document, stream)
        warnings.extend(linked.warnings)
        if not linked.ok:
            return linked.model_copy(update={"op": op, "warnings": warnings})

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": document.path,
                "date": period.isoformat(),
                "before": linked.data["before"],
                "after": linked.data["after"],
            },
            warnings=warnings,
        )

    def update_neighbors(self, document: Document, stream: Stream) -> ServiceResult:
        """Relink the existing predecessor and successor of *document*."""
        op = "update_neighbors"
        period = parse_date(document.basename, stream.date_format)
        if period is None:
            return _parse_failure(op, document, stream)

        updated: list[str] = []
        errors: list[dict[str, Any]] = []
        for step in (previous_period, next_period):
            name = format_date(step(period, stream.note_type), stream.date_format)
            try:
                neighbour = self._find_document(name, stream.folder_path)
            except StoreIOError as exc:
                return self._store_failure(op, exc)
            if neighbour is None:
                continue
            result = self.update_links(neighbour, stream)
            if not result.ok:
                errors.append(_error_entry(neighbour, result))
            elif result.data["changed"]:
                updated.append(neighbour.path)

        return ServiceResult(
            ok=True,
            op=op,
            data={"path": document.path, "updated": updated, "errors": errors},
        )

    # ------------------------------------------------------------------
    # Renames
    # ------------------------------------------------------------------

    def propagate_rename(
        self,
        document: Document,
        old_path: str,
        streams: Sequence[Stream],
    ) -> ServiceResult:
        """Point link fields that referenced *old_path* at *document* instead.

        Scans every stream whose folder contains *old_path*. Only the
        stream's two link fields are rewritten.
        """
        op = "propagate_rename"
        affected = [s for s in streams if in_folder(old_path, s.folder_path)]
        updated: list[str] = []
        errors: list[dict[str, Any]] = []

        try:
            listing = self._vault.store.list_documents()
        except StoreIOError as exc:
            return self._store_failure(op, exc)

        for stream in affected:
            fields = (stream.before_field_name, stream.after_field_name)

            def retarget(frontmatter: Metadata, fields: tuple[str, str] = fields) -> Patch:
                changed = False
                for field in fields:
                    value = frontmatter.get(field)
                    if isinstance(value, str) and references_document(value, old_path):
                        frontmatter[field] = retarget_reference(value, old_path, document.path)
                        changed = True
                return frontmatter if changed else NO_CHANGE

            for candidate in listing:
                if not in_folder(candidate.path, stream.folder_path):
                    continue
                try:
                    if self._patch(candidate, retarget):
                        updated.append(candidate.path)
                except StoreIOError as exc:
                    errors.append(
                        {"path": candidate.path, "code": STORE_IO_ERROR, "message": str(exc)}
                    )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": document.path,
                "old_path": old_path,
                "streams": [s.id for s in affected],
                "updated": updated,
                "errors": errors,
            },
        )

    def rename_document(
        self,
        old_path: str,
        new_path: str,
        streams: Sequence[Stream],
    ) -> ServiceResult:
        """Rename a document, propagate the new identity, and relink it."""
        op = "rename_document"
        store = self._vault.store
        try:
            entry = store.lookup(old_path)
            if entry.kind is not EntryKind.DOCUMENT:
                return ServiceResult.failure(
                    op, NOT_FOUND, f"No document at {old_path}", path=old_path
                )
            if store.exists(new_path):
                return ServiceResult.failure(
                    op, ALREADY_EXISTS, f"Document already exists: {new_path}", path=new_path
                )
            # Event handlers must not race the propagation below.
            with self._vault.guard.hold(new_path):
                document = store.rename(entry.path, new_path)
        except StoreIOError as exc:
            return self._store_failure(op, exc)

        propagated = self.propagate_rename(document, entry.path, streams)
        if not propagated.ok:
            return propagated.model_copy(update={"op": op})

        data: dict[str, Any] = {
            "path": document.path,
            "old_path": entry.path,
            "updated": propagated.data["updated"],
            "errors": propagated.data["errors"],
            "stream": None,
        }
        stream = resolve_stream(document.path, document.basename, streams)
        if stream is not None:
            data["stream"] = stream.id
            linked = self.update_links(document, stream)
            if not linked.ok:
                data["errors"].append(_error_entry(document, linked))
        return ServiceResult(ok=True, op=op, data=data)

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def update_stream_links(self, stream: Stream) -> ServiceResult:
        """Relink every parseable document under *stream*'s folder."""
        op = "update_stream_links"
        try:
            listing = self._vault.store.list_documents()
        except StoreIOError as exc:
            return self._store_failure(op, exc)

        processed = 0
        updated = 0
        errors: list[dict[str, Any]] = []
        for document in listing:
            if not in_folder(document.path, stream.folder_path):
                continue
            if parse_date(document.basename, stream.date_format) is None:
                continue
            processed += 1
            result = self.update_links(document, stream)
            if not result.ok:
                errors.append(_error_entry(document, result))
            elif result.data["changed"]:
                updated += 1

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "stream": stream.id,
                "processed": processed,
                "updated": updated,
                "errors": errors,
            },
        )

    def update_all_links(self, streams: Sequence[Stream]) -> ServiceResult:
        """Relink every stream; failures are counted, never fatal."""
        op = "update_all_links"
        per_stream: list[dict[str, Any]] = []
        processed = 0
        updated = 0
        errors: list[dict[str, Any]] = []
        for stream in streams:
            result = self.update_stream_links(stream)
            if not result.ok:
                assert result.error is not None
                errors.append(
                    {
                        "stream": stream.id,
                        "code": result.error.code,
                        "message": result.error.message,
                    }
                )
                continue
            per_stream.append(result.data)
            processed += result.data["processed"]
            updated += result.data["updated"]
            errors.extend(result.data["errors"])

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "streams": per_stream,
                "processed": processed,
                "updated": updated,
                "errors": errors,
            },
        )


def _error_entry(document: Document, result: ServiceResult) -> dict[str, Any]:
    assert result.error is not None
    return {"path": document.path, "code": result.error.code, "message": result.error.message}
