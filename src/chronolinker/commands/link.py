"""Commands: before/after link maintenance and renames."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronolinker.commands._base import ChronoCommand

if TYPE_CHECKING:
    from chronolinker.commands._context import AppContext


@click.command(
    cls=ChronoCommand,
    examples="""\
  chronolinker link Journal/2024-01-05.md
  chronolinker -v link Journal/2024-01-05.md""",
)
@click.argument("path")
@click.pass_obj
def link(app: AppContext, path: str) -> None:
    """Recompute the before/after links of PATH."""
    from chronolinker.services.links import LinkService

    document, stream = app.resolve_document(path)
    app.emit(LinkService(app.vault).update_links(document, stream))


@click.command(
    "link-all",
    cls=ChronoCommand,
    examples="""\
  chronolinker link-all                   # every stream
  chronolinker link-all --stream daily""",
)
@click.option("--stream", "stream_id", default=None, help="Limit to one stream id.")
@click.pass_obj
def link_all(app: AppContext, stream_id: str | None) -> None:
    """Relink every document of every stream (or of one stream)."""
    from chronolinker.services.links import LinkService

    svc = LinkService(app.vault)
    if stream_id is not None:
        app.emit(svc.update_stream_links(app.require_stream(stream_id)))
    else:
        app.emit(svc.update_all_links(app.vault.streams))


@click.command(
    cls=ChronoCommand,
    examples="""\
  chronolinker rename Journal/2024-01-05.md Journal/2024/2024-01-05.md""",
)
@click.argument("old")
@click.argument("new")
@click.pass_obj
def rename(app: AppContext, old: str, new: str) -> None:
    """Move OLD to NEW and repoint every link that referenced it."""
    from chronolinker.services.links import LinkService

    result = LinkService(app.vault).rename_document(
        app.vault_path(old), app.vault_path(new), app.vault.streams
    )
    app.emit(result)
