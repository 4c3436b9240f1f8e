"""Command group: domain lifecycle, enumeration, and bulk load."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from attrstore.commands._base import StoreGroup

if TYPE_CHECKING:
    from attrstore.commands._context import AppContext

_DOMAIN_EXAMPLES = """\
  attrstore domain create settings
  attrstore domain load settings defaults.json
  attrstore --region us-west-1 domain destroy settings"""


@click.group(cls=StoreGroup, examples=_DOMAIN_EXAMPLES)
def domain() -> None:
    """Create, destroy, inspect, and bulk-load domains."""


@domain.command(
    examples="""\
  attrstore domain create settings
  attrstore --json domain create settings"""
)
@click.argument("name")
@click.pass_obj
def create(app: AppContext, name: str) -> None:
    """Create domain NAME (no-op if it already exists)."""
    app.emit(app.service.create_domain(name))


@domain.command(
    examples="""\
  attrstore domain destroy settings"""
)
@click.argument("name")
@click.pass_obj
def destroy(app: AppContext, name: str) -> None:
    """Destroy domain NAME and every item in it."""
    app.emit(app.service.destroy_domain(name))


@domain.command(
    examples="""\
  attrstore domain exists settings
  attrstore -q domain exists settings"""
)
@click.argument("name")
@click.pass_obj
def exists(app: AppContext, name: str) -> None:
    """Report whether domain NAME exists."""
    app.emit(app.service.domain_exists(name))


@domain.command(
    "items",
    examples="""\
  attrstore domain items settings
  attrstore -q domain items settings | wc -l"""
)
@click.argument("name")
@click.pass_obj
def items(app: AppContext, name: str) -> None:
    """List the items in domain NAME."""
    app.emit(app.service.list_items(name))


@domain.command(
    examples="""\
  attrstore domain load settings defaults.json
  attrstore --json domain load settings defaults.json"""
)
@click.argument("name")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def load(app: AppContext, name: str, document: Path) -> None:
    """Load DOCUMENT (JSON: item -> {key: value}) into domain NAME."""
    app.emit(app.service.load_domain(name, document))
