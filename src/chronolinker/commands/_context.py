"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Provides lazy Vault initialization, path
normalization, and centralized result emission (stdout/stderr routing
and exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from chronolinker.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from chronolinker.config.settings import ChronoSettings
    from chronolinker.domain.streams import Stream
    from chronolinker.infrastructure.store import Document
    from chronolinker.infrastructure.vault import Vault
    from chronolinker.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The vault is created on first use so ``--help`` and ``--version``
    never touch the filesystem.
    """

    def __init__(self, settings: ChronoSettings) -> None:
        self.settings = settings
        self._vault: Vault | None = None

        from chronolinker.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def vault(self) -> Vault:
        """The vault instance (created lazily on first access)."""
        if self._vault is None:
            from chronolinker.infrastructure.vault import Vault

            self._vault = Vault(self.settings)
            self._vault.init_event_bus(sync=self.settings.sync or self.settings.engine.sync_events)
        return self._vault

    def close(self) -> None:
        """Drain pending plugin work. Safe to call when no vault was opened."""
        if self._vault is not None:
            self._vault.close()
            self._vault = None

    def vault_path(self, path: str) -> str:
        """Turn a user-supplied path into a vault-relative POSIX path.

        Absolute paths and paths that exist relative to the working
        directory are made relative to the vault root; anything else is
        taken as already vault-relative.
        """
        candidate = Path(path)
        root = self.settings.vault_root.resolve()
        if not candidate.is_absolute() and candidate.exists():
            candidate = candidate.resolve()
        if candidate.is_absolute():
            try:
                return candidate.resolve().relative_to(root).as_posix()
            except ValueError:
                raise click.BadParameter(f"{path} is outside the vault at {root}") from None
        return candidate.as_posix()

    def require_stream(self, stream_id: str) -> Stream:
        """Look up a configured stream or exit with ``NO_STREAM``."""
        from chronolinker.services.streams import StreamService

        result = StreamService(self.vault).get_stream(stream_id)
        if not result.ok:
            self.emit(result)
        stream = self.settings.get_stream(stream_id)
        assert stream is not None
        return stream

    def resolve_document(self, path: str) -> tuple[Document, Stream]:
        """Resolve *path* to its document and stream, or exit with the failure."""
        from chronolinker.infrastructure.store import Document
        from chronolinker.services.streams import StreamService

        result = StreamService(self.vault).resolve(self.vault_path(path))
        if not result.ok:
            self.emit(result)
        stream = self.settings.get_stream(result.data["stream"])
        assert stream is not None
        return Document(result.data["path"]), stream

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr and exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
