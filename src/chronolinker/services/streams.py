"""StreamService — stream listing and document-to-stream resolution."""

from __future__ import annotations

from typing import Any

from chronolinker.domain.periods import parse_date
from chronolinker.domain.streams import Stream, resolve_stream
from chronolinker.domain.types import EntryKind
from chronolinker.infrastructure.store import StoreIOError
from chronolinker.services.base import BaseService
from chronolinker.services.result import NO_STREAM, NOT_FOUND, ServiceResult


def describe_stream(stream: Stream) -> dict[str, Any]:
    """Summary of *stream* for listings."""
    return {
        "id": stream.id,
        "name": stream.display_name,
        "folder_path": stream.folder_path,
        "note_type": str(stream.note_type),
        "date_format": stream.date_format,
        "auto_linking": stream.auto_linking,
        "belonging": (
            {
                "folder": stream.aggregate_folder,
                "note_type": str(stream.belonging_note_type),
                "date_format": stream.belonging_note_date_format,
            }
            if stream.enable_belonging_notes
            else None
        ),
    }


class StreamService(BaseService):
    """Answers which stream a document belongs to."""

    def list_streams(self) -> ServiceResult:
        streams = self._vault.streams
        return ServiceResult(
            ok=True,
            op="list_streams",
            data={"streams": [describe_stream(s) for s in streams], "count": len(streams)},
        )

    def get_stream(self, stream_id: str) -> ServiceResult:
        stream = self._vault.settings.get_stream(stream_id)
        if stream is None:
            return ServiceResult.failure(
                "get_stream", NO_STREAM, f"No stream with id {stream_id!r}", stream=stream_id
            )
        return ServiceResult(ok=True, op="get_stream", data=describe_stream(stream))

    def resolve(self, path: str) -> ServiceResult:
        """Resolve the document at *path* to its owning stream.

        Data carries the normalized ``path``, the ``stream`` id, and the
        parsed ``date``.
        """
        op = "resolve_stream"
        try:
            entry = self._vault.store.lookup(path)
        except StoreIOError as exc:
            return self._store_failure(op, exc)
        document = entry.document
        if entry.kind is not EntryKind.DOCUMENT or document is None:
            return ServiceResult.failure(op, NOT_FOUND, f"No document at {path}", path=path)

        stream = resolve_stream(document.path, document.basename, self._vault.streams)
        if stream is None:
            return ServiceResult.failure(
                op, NO_STREAM, f"No stream owns {document.path}", path=document.path
            )
        period = parse_date(document.basename, stream.date_format)
        assert period is not None
        return ServiceResult(
            ok=True,
            op=op,
            data={"path": document.path, "stream": stream.id, "date": period.isoformat()},
        )
