"""Granularity and store-entry enums shared across the engine."""

from __future__ import annotations

from enum import StrEnum


class Granularity(StrEnum):
    """Temporal unit of a stream (and of its belonging documents)."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    HALF_YEAR = "half_year"
    YEAR = "year"


class EntryKind(StrEnum):
    """Tag on every store lookup result."""

    DOCUMENT = "document"
    FOLDER = "folder"
    MISSING = "missing"


class Direction(StrEnum):
    """Chronological neighbour direction."""

    PREVIOUS = "previous"
    NEXT = "next"
