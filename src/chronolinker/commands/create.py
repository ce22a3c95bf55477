"""Command: create a stream document for a date."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import click

from chronolinker.commands._base import ChronoCommand

if TYPE_CHECKING:
    from chronolinker.commands._context import AppContext
    from chronolinker.domain.streams import Stream


def _period_for(stream: Stream, value: str | None) -> date:
    """Interpret *value* as a name in the stream's format, else as an ISO date."""
    from chronolinker.domain.periods import parent_boundary, parse_date

    if value is None:
        period = date.today()
    else:
        parsed = parse_date(value, stream.date_format)
        if parsed is None:
            try:
                parsed = date.fromisoformat(value)
            except ValueError:
                msg = f"expected YYYY-MM-DD or a name matching {stream.date_format!r}"
                raise click.BadParameter(msg, param_hint="DATE") from None
        period = parsed
    return parent_boundary(period, stream.note_type)


@click.command(
    cls=ChronoCommand,
    examples="""\
  chronolinker create daily               # today
  chronolinker create daily 2024-01-05
  chronolinker create weekly 2024-W02     # name in the stream's own format""",
)
@click.argument("stream_id")
@click.argument("date_value", metavar="[DATE]", required=False)
@click.pass_obj
def create(app: AppContext, stream_id: str, date_value: str | None) -> None:
    """Create the STREAM_ID document for DATE (default: today) and link it."""
    from chronolinker.services.links import LinkService

    stream = app.require_stream(stream_id)
    app.emit(LinkService(app.vault).create_document(stream, _period_for(stream, date_value)))
