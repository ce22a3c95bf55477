"""Template variable substitution for new documents.

Pure function over the template text: no file access. Supported tokens::

    {{date}}            the period as YYYY-MM-DD
    {{date:FORMAT}}     the period in a moment-style FORMAT
    {{title}}           the document's own filename
    {{stream}}          the stream's display name
    {{prevDate}}        filename of the previous period
    {{nextDate}}        filename of the next period
"""

from __future__ import annotations

import re
from datetime import date
from typing import TYPE_CHECKING

from chronolinker.domain.periods import format_date, next_period, previous_period

if TYPE_CHECKING:
    from chronolinker.domain.streams import Stream

_DATE_WITH_FORMAT = re.compile(r"\{\{date:([^}]*)\}\}")


def render_template(
    template: str,
    period: date,
    stream: Stream,
    *,
    belonging: bool = False,
) -> str:
    """Substitute template tokens for *period* in *stream*.

    With *belonging*, titles and neighbours use the stream's belonging
    granularity and format instead of its own.
    """
    fmt = stream.belonging_note_date_format if belonging else stream.date_format
    unit = stream.belonging_note_type if belonging else stream.note_type
    prev_name = format_date(previous_period(period, unit), fmt)
    next_name = format_date(next_period(period, unit), fmt)

    rendered = template.replace("{{date}}", format_date(period, "YYYY-MM-DD"))
    rendered = _DATE_WITH_FORMAT.sub(lambda m: format_date(period, m.group(1)), rendered)
    return (
        rendered.replace("{{title}}", format_date(period, fmt))
        .replace("{{stream}}", stream.name)
        .replace("{{prevDate}}", prev_name)
        .replace("{{nextDate}}", next_name)
    )
