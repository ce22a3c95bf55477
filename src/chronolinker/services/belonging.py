"""BelongingService — aggregate documents for coarser periods.

A daily document belongs to the weekly document whose week contains it
(or month, quarter, ... per the stream's ``belonging_note_type``). The
belonging document carries two generated fields, a date range and a list
of references to its children, both regenerated in full on every refresh.

Aggregation is shallow: children are the documents directly inside the
stream folder, never those in sub-folders.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any

from chronolinker.domain.links import DOCUMENT_SUFFIX, format_reference
from chronolinker.domain.periods import child_range, format_date, parent_boundary, parse_date
from chronolinker.domain.streams import Stream, directly_in_folder, join_path
from chronolinker.infrastructure.store import Document, Metadata, Patch, StoreIOError
from chronolinker.services.base import BaseService
from chronolinker.services.result import (
    DATE_PARSE_ERROR,
    FEATURE_DISABLED,
    INVALID_GRANULARITY_PAIRING,
    ServiceResult,
)


def _disabled(op: str, stream: Stream) -> ServiceResult:
    return ServiceResult.failure(
        op,
        FEATURE_DISABLED,
        f"Belonging notes are disabled for stream {stream.id!r}",
        stream=stream.id,
    )


def _belonging_period(child: Document, stream: Stream) -> date | None:
    period = parse_date(child.basename, stream.date_format)
    if period is None:
        return None
    return parent_boundary(period, stream.belonging_note_type)


class BelongingService(BaseService):
    """Creates and refreshes belonging documents."""

    # ------------------------------------------------------------------
    # Single document
    # ------------------------------------------------------------------

    def upsert_belonging_document(self, child: Document, stream: Stream) -> ServiceResult:
        """Ensure *child*'s belonging document exists, then refresh it."""
        op = "upsert_belonging_document"
        if not stream.enable_belonging_notes:
            return _disabled(op, stream)

        boundary = _belonging_period(child, stream)
        if boundary is None:
            return ServiceResult.failure(
                op,
                DATE_PARSE_ERROR,
                f"{child.basename!r} does not match {stream.date_format!r}",
                path=child.path,
                stream=stream.id,
            )

        warnings: list[str] = []
        name = format_date(boundary, stream.belonging_note_date_format)
        folder = stream.aggregate_folder
        store = self._vault.store
        created = False
        try:
            belonging = self._find_document(name, folder)
            if belonging is None:
                if folder:
                    store.create_folder(folder)
                body = self._initial_body(stream, boundary, warnings, belonging=True)
                path = join_path(folder, f"{name}{DOCUMENT_SUFFIX}")
                belonging = store.create_document(path, body)
                created = True
        except StoreIOError as exc:
            return self._store_failure(op, exc)

        refreshed = self.refresh_content(belonging, stream)
        warnings.extend(refreshed.warnings)
        if not refreshed.ok:
            return refreshed.model_copy(update={"op": op, "warnings": warnings})

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": belonging.path,
                "child": child.path,
                "created": created,
                "changed": refreshed.data.get("changed", False),
                "children": refreshed.data.get("children", []),
            },
            warnings=warnings,
        )

    def refresh_content(self, belonging: Document, stream: Stream) -> ServiceResult:
        """Regenerate *belonging*'s date-range and child-list fields.

        Unparseable names and granularities without a child range are
        skipped, not failed.
        """
        op = "refresh_content"
        period = parse_date(belonging.basename, stream.belonging_note_date_format)
        if period is None:
            return ServiceResult(
                ok=True,
                op=op,
                data={"path": belonging.path, "skipped": True},
                warnings=[
                    f"{belonging.basename!r} does not match "
                    f"{stream.belonging_note_date_format!r}; skipped"
                ],
            )

        span = child_range(period, stream.belonging_note_type)
        if span is None:
            return ServiceResult(
                ok=True,
                op=op,
                data={"path": belonging.path, "skipped": True},
                warnings=[
                    f"{INVALID_GRANULARITY_PAIRING}: "
                    f"{stream.belonging_note_type!s} has no child range; skipped"
                ],
            )

        try:
            dated: list[tuple[date, Document]] = []
            for document in self._vault.store.list_documents():
                if document.path == belonging.path:
                    continue
                if not directly_in_folder(document.path, stream.folder_path):
                    continue
                child_period = parse_date(document.basename, stream.date_format)
                if child_period is not None and child_period in span:
                    dated.append((child_period, document))
            dated.sort(key=lambda item: item[0])

            children = [format_reference(doc.path, doc.basename) for _, doc in dated]
            date_range = {
                "start": format_date(span.start, stream.date_format),
                "end": format_date(span.end, stream.date_format),
            }

            def regenerate(frontmatter: Metadata) -> Patch:
                frontmatter[stream.date_range_field_name] = date_range
                frontmatter[stream.child_list_field_name] = children
                return frontmatter

            changed = self._patch(belonging, regenerate)
        except StoreIOError as exc:
            return self._store_failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": belonging.path,
                "skipped": False,
                "changed": changed,
                "date_range": date_range,
                "children": children,
            },
        )

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def refresh_stream(self, stream: Stream) -> ServiceResult:
        """Upsert and refresh every belonging document of *stream* once."""
        op = "refresh_stream"
        if not stream.enable_belonging_notes:
            return _disabled(op, stream)

        try:
            listing = self._vault.store.list_documents()
        except StoreIOError as exc:
            return self._store_failure(op, exc)

        seen_names: set[str] = set()
        seen_paths: set[str] = set()
        created = 0
        refreshed = 0
        errors: list[dict[str, Any]] = []
        warnings: list[str] = []
        for child in listing:
            if not directly_in_folder(child.path, stream.folder_path):
                continue
            boundary = _belonging_period(child, stream)
            if boundary is None:
                continue
            name = format_date(boundary, stream.belonging_note_date_format)
            if name in seen_names:
                continue
            seen_names.add(name)

            result = self.upsert_belonging_document(child, stream)
            if not result.ok:
                assert result.error is not None
                errors.append(
                    {
                        "path": child.path,
                        "code": result.error.code,
                        "message": result.error.message,
                    }
                )
                continue
            if result.data["path"] in seen_paths:
                continue
            seen_paths.add(result.data["path"])
            warnings.extend(result.warnings)
            if result.data["created"]:
                created += 1
            else:
                refreshed += 1

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "stream": stream.id,
                "created": created,
                "refreshed": refreshed,
                "documents": sorted(seen_paths),
                "errors": errors,
            },
            warnings=warnings,
        )

    def refresh_all_enabled_streams(self, streams: Sequence[Stream]) -> ServiceResult:
        """Run :meth:`refresh_stream` for every stream with belonging notes on."""
        op = "refresh_all_enabled_streams"
        per_stream: list[dict[str, Any]] = []
        created = 0
        refreshed = 0
        errors: list[dict[str, Any]] = []
        warnings: list[str] = []
        for stream in streams:
            if not stream.enable_belonging_notes:
                continue
            result = self.refresh_stream(stream)
            warnings.extend(result.warnings)
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
            created += result.data["created"]
            refreshed += result.data["refreshed"]
            errors.extend(result.data["errors"])

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "streams": per_stream,
                "created": created,
                "refreshed": refreshed,
                "errors": errors,
            },
            warnings=warnings,
        )
