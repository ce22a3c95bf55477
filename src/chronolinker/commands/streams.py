"""Commands: list streams and resolve a document to its stream."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronolinker.commands._base import ChronoCommand

if TYPE_CHECKING:
    from chronolinker.commands._context import AppContext


@click.command(
    cls=ChronoCommand,
    examples="""\
  chronolinker streams
  chronolinker --json streams
  chronolinker -q streams                 # ids only""",
)
@click.pass_obj
def streams(app: AppContext) -> None:
    """List configured streams in resolution order."""
    from chronolinker.services.streams import StreamService

    app.emit(StreamService(app.vault).list_streams())


@click.command(
    cls=ChronoCommand,
    examples="""\
  chronolinker resolve Journal/2024-01-05.md
  chronolinker --json resolve Journal/2024-W01.md""",
)
@click.argument("path")
@click.pass_obj
def resolve(app: AppContext, path: str) -> None:
    """Show which stream owns PATH and the date it encodes."""
    from chronolinker.services.streams import StreamService

    app.emit(StreamService(app.vault).resolve(app.vault_path(path)))
