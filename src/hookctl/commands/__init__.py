"""Subcommand modules for hookctl.

Provides register_commands() which uses deferred imports to keep
``hookctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from hookctl.commands.install import install
    from hookctl.commands.list_cmd import list_cmd
    from hookctl.commands.run import run
    from hookctl.commands.uninstall import uninstall

    cli.add_command(run)
    cli.add_command(install)
    cli.add_command(uninstall)
    cli.add_command(list_cmd)
