"""Subcommand modules for attrstore.

Provides register_commands() which uses deferred imports to keep
``attrstore --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``domain`` and ``item`` command groups on the root CLI."""
    from attrstore.commands.domain_cmd import domain
    from attrstore.commands.item import item

    cli.add_command(domain)
    cli.add_command(item)
