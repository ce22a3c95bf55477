"""Commands: belonging documents."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronolinker.commands._base import ChronoCommand

if TYPE_CHECKING:
    from chronolinker.commands._context import AppContext


@click.command(
    cls=ChronoCommand,
    examples="""\
  chronolinker belong Journal/2024-01-05.md
  chronolinker -v belong Journal/2024-01-05.md     # list the children""",
)
@click.argument("path")
@click.pass_obj
def belong(app: AppContext, path: str) -> None:
    """Create or refresh the belonging document of PATH."""
    from chronolinker.services.belonging import BelongingService

    document, stream = app.resolve_document(path)
    app.emit(BelongingService(app.vault).upsert_belonging_document(document, stream))


@click.command(
    cls=ChronoCommand,
    examples="""\
  chronolinker refresh                    # every stream with belonging notes
  chronolinker refresh --stream daily""",
)
@click.option("--stream", "stream_id", default=None, help="Limit to one stream id.")
@click.pass_obj
def refresh(app: AppContext, stream_id: str | None) -> None:
    """Regenerate belonging documents and their child lists."""
    from chronolinker.services.belonging import BelongingService

    svc = BelongingService(app.vault)
    if stream_id is not None:
        app.emit(svc.refresh_stream(app.require_stream(stream_id)))
    else:
        app.emit(svc.refresh_all_enabled_streams(app.vault.streams))
