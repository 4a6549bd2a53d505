"""Command: remove hookctl's Git hook shims and generated files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from hookctl.commands._base import HookCommand

if TYPE_CHECKING:
    from hookctl.commands._context import AppContext


@click.command(cls=HookCommand, examples="  hookctl uninstall\n  hookctl uninstall /path/to/repo")
@click.argument("path", required=False, default=".")
@click.pass_obj
def uninstall(app: AppContext, path: str) -> None:
    """Remove hookctl hook shims and its control directory."""
    from hookctl.services.install import InstallService

    root = Path(path).resolve()
    app.emit(InstallService(app.settings_for(root)).uninstall(root))
