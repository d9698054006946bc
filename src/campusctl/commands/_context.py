"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy document initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from campusctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from campusctl.config.settings import CampusSettings
    from campusctl.infrastructure.document import CampusDocument
    from campusctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. The document is lazily
    initialized on first use so ``--help`` and ``--version`` never touch
    the filesystem.
    """

    def __init__(self, settings: CampusSettings) -> None:
        self.settings = settings
        self._document: CampusDocument | None = None

        from campusctl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            document=settings.document_path,
        )

        if settings.verbose:
            from campusctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def document(self) -> CampusDocument:
        """The campus document (created lazily on first access)."""
        if self._document is None:
            from campusctl.infrastructure.document import CampusDocument

            self._document = CampusDocument(self.settings)
        return self._document

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Success goes to stdout. Validation warnings from a mutation go to
        stderr, except under ``--json`` (they are in the payload) and
        ``--quiet``. Failure goes to stderr and exits 1.
        """
        output = format_result(result, settings=self._output)
        if not result.ok:
            click.echo(output, err=True)
            raise SystemExit(1)

        click.echo(output)
        if self._output.json_output or self._output.quiet:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)

    @property
    def _output(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
