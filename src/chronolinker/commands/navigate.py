"""Commands: step to the previous or next document of a stream."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import click

from chronolinker.commands._base import ChronoCommand
from chronolinker.domain.types import Direction

if TYPE_CHECKING:
    from chronolinker.commands._context import AppContext


def _navigate(app: AppContext, path: str, direction: Direction, create: bool) -> None:
    from chronolinker.services.links import LinkService

    document, stream = app.resolve_document(path)
    svc = LinkService(app.vault)
    result = svc.navigate_adjacent(document, stream, direction)
    if result.ok and not result.data["exists"] and create:
        result = svc.create_document(stream, date.fromisoformat(result.data["date"]))
    app.emit(result)


@click.command(
    "next",
    cls=ChronoCommand,
    examples="""\
  chronolinker next Journal/2024-01-05.md
  chronolinker next Journal/2024-01-05.md --create""",
)
@click.argument("path")
@click.option("--create", is_flag=True, help="Create the next document if it is missing.")
@click.pass_obj
def next_cmd(app: AppContext, path: str, create: bool) -> None:
    """Show the document after PATH in its stream."""
    _navigate(app, path, Direction.NEXT, create)


@click.command(
    "prev",
    cls=ChronoCommand,
    examples="""\
  chronolinker prev Journal/2024-01-05.md
  chronolinker -q prev Journal/2024-01-05.md --create""",
)
@click.argument("path")
@click.option("--create", is_flag=True, help="Create the previous document if it is missing.")
@click.pass_obj
def prev_cmd(app: AppContext, path: str, create: bool) -> None:
    """Show the document before PATH in its stream."""
    _navigate(app, path, Direction.PREVIOUS, create)
