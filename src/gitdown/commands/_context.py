"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Builds the render service lazily so ``--help`` and
``--version`` never load plugins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gitdown.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from gitdown.config.settings import GitdownSettings
    from gitdown.services.render import RenderService
    from gitdown.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: GitdownSettings) -> None:
        self.settings = settings
        self._service: RenderService | None = None

        from gitdown.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def service(self) -> RenderService:
        """The render service (created lazily on first access)."""
        if self._service is None:
            from gitdown.services.render import RenderService

            self._service = RenderService(self.settings)
        return self._service

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
