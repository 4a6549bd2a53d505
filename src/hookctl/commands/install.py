"""Command: install the hook registry and Git hook shims."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from hookctl.commands._base import HookCommand

if TYPE_CHECKING:
    from hookctl.commands._context import AppContext


@click.command(
    cls=HookCommand,
    examples="""\
  hookctl install
  hookctl install /path/to/repo
  hookctl install --force""",
)
@click.argument("path", required=False, default=".")
@click.option("--force", is_flag=True, default=None, help="Replace hooks hookctl did not write.")
@click.pass_obj
def install(app: AppContext, path: str, force: bool | None) -> None:
    """Build the action registry and link Git hooks to hookctl."""
    from hookctl.services.install import InstallService

    root = Path(path).resolve()
    settings = app.settings_for(root)
    app.emit(InstallService(settings).install(root, force=force))
