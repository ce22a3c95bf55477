"""Stream definitions and stream resolution.

A stream is a configured series of date-named documents sharing a folder,
a granularity, and a filename pattern. Streams are frozen Pydantic models;
omitted formats and field names default from the granularity.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePosixPath
from typing import Any

from pydantic import BaseModel, model_validator

from chronolinker.domain.periods import parse_date
from chronolinker.domain.types import Granularity

DEFAULT_DATE_FORMATS: dict[Granularity, str] = {
    Granularity.DAY: "YYYY-MM-DD",
    Granularity.WEEK: "YYYY-[W]ww",
    Granularity.MONTH: "YYYY-MM",
    Granularity.QUARTER: "YYYY-[Q]Q",
    Granularity.HALF_YEAR: "YYYY-[H]H",
    Granularity.YEAR: "YYYY",
}

_FIELD_PREFIXES: dict[Granularity, str] = {
    Granularity.DAY: "day",
    Granularity.WEEK: "week",
    Granularity.MONTH: "month",
    Granularity.QUARTER: "quarter",
    Granularity.HALF_YEAR: "half-year",
    Granularity.YEAR: "year",
}


class Stream(BaseModel):
    """One ``[[streams]]`` table."""

    model_config = {"frozen": True}

    id: str
    name: str = ""
    folder_path: str
    note_type: Granularity = Granularity.DAY
    date_format: str = ""
    auto_linking: bool = True
    overwrite_existing: bool = False
    before_field_name: str = ""
    after_field_name: str = ""
    enable_belonging_notes: bool = False
    belonging_note_folder: str = ""
    belonging_note_type: Granularity = Granularity.WEEK
    belonging_note_date_format: str = ""
    template_path: str = ""
    child_list_field_name: str = "child-notes"
    date_range_field_name: str = "date-range"

    @model_validator(mode="before")
    @classmethod
    def _fill_granularity_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = dict(data)
        note_type = Granularity(values.get("note_type") or Granularity.DAY)
        belonging_type = Granularity(values.get("belonging_note_type") or Granularity.WEEK)
        prefix = _FIELD_PREFIXES[note_type]
        values["folder_path"] = normalize_folder(str(values.get("folder_path", "")))
        values["belonging_note_folder"] = normalize_folder(
            str(values.get("belonging_note_folder") or "")
        )
        if not values.get("name"):
            values["name"] = values.get("id", "")
        if not values.get("date_format"):
            values["date_format"] = DEFAULT_DATE_FORMATS[note_type]
        if not values.get("before_field_name"):
            values["before_field_name"] = f"{prefix}-before"
        if not values.get("after_field_name"):
            values["after_field_name"] = f"{prefix}-after"
        if not values.get("belonging_note_date_format"):
            values["belonging_note_date_format"] = DEFAULT_DATE_FORMATS[belonging_type]
        return values

    @property
    def display_name(self) -> str:
        return self.name or self.folder_path

    @property
    def aggregate_folder(self) -> str:
        """Folder that holds this stream's belonging documents."""
        return self.belonging_note_folder or self.folder_path


# ---------------------------------------------------------------------------
# Folder helpers (vault-relative POSIX paths)
# ---------------------------------------------------------------------------


def normalize_folder(folder: str) -> str:
    """Strip surrounding slashes and whitespace; the vault root is ``""``."""
    return folder.strip().strip("/")


def in_folder(path: str, folder: str) -> bool:
    """True if *path* lies anywhere under *folder*."""
    folder = normalize_folder(folder)
    return not folder or path.startswith(f"{folder}/")


def directly_in_folder(path: str, folder: str) -> bool:
    """True if *path*'s immediate parent folder is *folder*."""
    parent = str(PurePosixPath(path).parent)
    return normalize_folder("" if parent == "." else parent) == normalize_folder(folder)


def join_path(folder: str, name: str) -> str:
    folder = normalize_folder(folder)
    return f"{folder}/{name}" if folder else name


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_stream(path: str, basename: str, streams: Sequence[Stream]) -> Stream | None:
    """Return the first stream that owns the document at *path*.

    A stream owns a document when its folder is a path prefix of *path*
    and its date format parses *basename*. Configuration order breaks ties.
    """
    for stream in streams:
        if not in_folder(path, stream.folder_path):
            continue
        if parse_date(basename, stream.date_format) is not None:
            return stream
    return None
