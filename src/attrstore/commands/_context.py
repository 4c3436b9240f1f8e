"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy store construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from attrstore.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from attrstore.config.settings import AttrStoreSettings
    from attrstore.infrastructure.store import AttributeStore
    from attrstore.services.domain import DomainService
    from attrstore.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is built on first use so ``--help`` and ``--version`` never
    touch a backend or read key files.
    """

    def __init__(self, settings: AttrStoreSettings) -> None:
        self.settings = settings
        self._store: AttributeStore | None = None

        from attrstore.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from attrstore.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> AttributeStore:
        """The attribute store (created lazily on first access)."""
        if self._store is None:
            from attrstore.infrastructure.store import open_store

            try:
                self._store = open_store(self.settings)
            except (OSError, ValueError, TypeError) as exc:
                raise click.ClickException(f"Cannot open store: {exc}") from exc
            logger.debug(
                "Opened %s backend (region=%s)",
                self.settings.backend.kind,
                self.settings.effective_region,
            )
        return self._store

    @property
    def service(self) -> DomainService:
        from attrstore.services.domain import DomainService

        return DomainService(self.store)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
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
