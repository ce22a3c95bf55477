"""Subcommand modules for chronolinker.

Provides register_commands(), which imports each command module only when
the CLI is assembled.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every standalone command on the root CLI group."""
    from chronolinker.commands.belong import belong, refresh
    from chronolinker.commands.create import create
    from chronolinker.commands.link import link, link_all, rename
    from chronolinker.commands.navigate import next_cmd, prev_cmd
    from chronolinker.commands.streams import resolve, streams

    cli.add_command(streams)
    cli.add_command(resolve)
    cli.add_command(link)
    cli.add_command(link_all)
    cli.add_command(create)
    cli.add_command(next_cmd)
    cli.add_command(prev_cmd)
    cli.add_command(belong)
    cli.add_command(refresh)
    cli.add_command(rename)
