"""Rich Console factory and theme for chronolinker output.

Consoles render to a StringIO buffer so formatting stays a pure
``ServiceResult -> str`` function. In non-TTY environments (tests,
pipes) Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CHRONO_THEME = Theme(
    {
        "chrono.ok": "bold green",
        "chrono.error": "bold red",
        "chrono.warning": "bold yellow",
        "chrono.op": "bold cyan",
        "chrono.key": "dim",
        "chrono.id": "bold blue",
        "chrono.path": "dim",
        "chrono.link": "magenta",
        "chrono.missing": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=CHRONO_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
