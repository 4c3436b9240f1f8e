"""Command group: item properties and attribute export."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from attrstore.commands._base import StoreGroup

if TYPE_CHECKING:
    from attrstore.commands._context import AppContext

_ITEM_EXAMPLES = """\
  attrstore item set settings web port 8080
  attrstore item get settings web port
  attrstore item set --encrypt settings web db_password hunter2
  attrstore item json settings web"""


@click.group(cls=StoreGroup, examples=_ITEM_EXAMPLES)
def item() -> None:
    """Read and write single-valued item properties."""


@item.command(
    "get",
    examples="""\
  attrstore item get settings web port
  attrstore -q item get --decrypt settings web db_password""",
)
@click.argument("domain")
@click.argument("name")
@click.argument("key")
@click.option("--decrypt", is_flag=True, help="Decrypt the value with the private key.")
@click.pass_obj
def get_cmd(app: AppContext, domain: str, name: str, key: str, decrypt: bool) -> None:
    """Print the value of KEY on item NAME in DOMAIN."""
    app.emit(app.service.get_property(domain, name, key, decrypt=decrypt))


@item.command(
    "set",
    examples="""\
  attrstore item set settings web port 8080
  attrstore item set --encrypt settings web db_password hunter2""",
)
@click.argument("domain")
@click.argument("name")
@click.argument("key")
@click.argument("value")
@click.option("--encrypt", is_flag=True, help="Encrypt the value with the public key.")
@click.pass_obj
def set_cmd(
    app: AppContext, domain: str, name: str, key: str, value: str, encrypt: bool
) -> None:
    """Set KEY on item NAME in DOMAIN to exactly VALUE (replacing any old value)."""
    app.emit(app.service.set_property(domain, name, key, value, encrypt=encrypt))


@item.command(
    examples="""\
  attrstore item destroy settings web"""
)
@click.argument("domain")
@click.argument("name")
@click.pass_obj
def destroy(app: AppContext, domain: str, name: str) -> None:
    """Destroy item NAME and all its attributes."""
    app.emit(app.service.destroy_item(domain, name))


@item.command(
    "json",
    examples="""\
  attrstore item json settings web
  attrstore item json settings web | jq '.[0]'""",
)
@click.argument("domain")
@click.argument("name")
@click.pass_obj
def json_cmd(app: AppContext, domain: str, name: str) -> None:
    """Print item NAME's attributes as canonical JSON (``null`` if absent)."""
    result = app.service.item_json(domain, name)
    if not result.ok or app.settings.json_output:
        app.emit(result)
        return
    # Pipe-friendly: raw canonical JSON to stdout
    click.echo(result.data["json"] or "null")
