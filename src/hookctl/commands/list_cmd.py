"""Command: show the installed registry (named list_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from hookctl.commands._base import HookCommand
from hookctl.domain.hooks import supported_hooks

if TYPE_CHECKING:
    from hookctl.commands._context import AppContext


@click.command(
    "list",
    cls=HookCommand,
    examples="""\
  hookctl list
  hookctl list --hook pre-commit
  hookctl --json list /path/to/repo""",
)
@click.argument("path", required=False, default=".")
@click.option("--hook", type=click.Choice(supported_hooks()), default=None, help="Only this hook.")
@click.pass_obj
def list_cmd(app: AppContext, path: str, hook: str | None) -> None:
    """List registered actions in dispatch order."""
    from hookctl.services.install import InstallService

    root = Path(path).resolve()
    app.emit(InstallService(app.settings_for(root)).list_entries(root, hook))
