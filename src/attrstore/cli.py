"""Root CLI group for attrstore with global flags and command registration."""

from __future__ import annotations

import click

from attrstore import __version__
from attrstore.commands import register_commands
from attrstore.commands._context import AppContext
from attrstore.config.settings import AttrStoreSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="attrstore")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--region", default=None, help="Backend region (overrides [backend] region).")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    region: str | None,
) -> None:
    """attrstore — single-valued, encryptable attributes with read-your-writes."""
    ctx.ensure_object(dict)
    settings = AttrStoreSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
        region=region,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
