"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, chronolinker.toml only contains
overrides plus the ``[[streams]]`` tables.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from chronolinker.domain.streams import Stream


class EngineConfig(BaseModel):
    """[engine] section."""

    model_config = {"frozen": True}

    settle_delay_ms: int = Field(default=500, ge=0)
    sync_events: bool = True


def check_unique_ids(streams: tuple[Stream, ...]) -> tuple[Stream, ...]:
    """Reject duplicate stream ids; configuration order is preserved."""
    seen: set[str] = set()
    for stream in streams:
        if stream.id in seen:
            msg = f"Duplicate stream id: {stream.id!r}"
            raise ValueError(msg)
        seen.add(stream.id)
    return streams
