"""Command: dispatch a Git hook (what the generated hook shims call)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

from hookctl.commands._base import HookCommand

if TYPE_CHECKING:
    from hookctl.commands._context import AppContext

logger = logging.getLogger(__name__)


@click.command(
    cls=HookCommand,
    context_settings={"ignore_unknown_options": True},
    examples="""\
  hookctl run pre-commit "$(git rev-parse --show-toplevel)"
  hookctl run commit-msg . .git/COMMIT_EDITMSG
  hookctl -v run pre-push . origin git@example.com:project.git""",
)
@click.argument("hook")
@click.argument("root", type=click.Path(file_okay=False, path_type=Path))
@click.argument("hook_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def run(app: AppContext, hook: str, root: Path, hook_args: tuple[str, ...]) -> None:
    """Run every action registered for HOOK in the repository at ROOT.

    Extra arguments are forwarded to each action unchanged. Exits 0 unless
    an action aborts the Git operation; broken configuration skips every
    action instead of blocking Git.
    """
    from hookctl.services.dispatch import DispatchService

    root = root.resolve()
    try:
        settings = app.settings_for(root)
    except click.ClickException as exc:
        logger.warning("Invalid hookctl configuration, skipping git hooks: %s", exc.message)
        return
    result = DispatchService(settings).dispatch(hook, root, hook_args)
    app.emit(result, silent=not (settings.verbose or settings.json_output))
