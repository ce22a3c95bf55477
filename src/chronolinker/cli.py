"""Root CLI group for chronolinker with global flags and command registration."""

from __future__ import annotations

import click

from chronolinker import __version__
from chronolinker.commands import register_commands
from chronolinker.commands._base import ChronoGroup
from chronolinker.commands._context import AppContext
from chronolinker.config.settings import ChronoSettings


@click.group(
    cls=ChronoGroup,
    invoke_without_command=True,
    examples="""\
  chronolinker streams
  chronolinker create daily 2024-01-05
  chronolinker link-all
  chronolinker --json next Journal/2024-01-05.md --create
  chronolinker refresh --stream daily""",
)
@click.version_option(version=__version__, prog_name="chronolinker")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--sync", is_flag=True, help="Force synchronous event dispatch.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    sync: bool,
) -> None:
    """chronolinker: chronological links between date-named notes."""
    settings = ChronoSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        sync=sync,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
