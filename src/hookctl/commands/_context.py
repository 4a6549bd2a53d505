"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Resolves settings per repository and centralizes
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from hookctl.config.settings import HookctlSettings
from hookctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from hookctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Global flags are kept so settings can be re-resolved for the
    repository a subcommand targets: ``hookctl.toml`` is discovered by
    walking up from that repository, not from the process CWD. A broken
    config next to the CWD leaves the root settings at flag-only defaults.
    """

    def __init__(self, *, config_path: str | None = None, **cli_flags: Any) -> None:
        self._config_path = config_path
        self._cli_flags = cli_flags
        try:
            self.settings = HookctlSettings.from_cli(config_path=config_path, **cli_flags)
        except click.ClickException:
            # Reported by the subcommand once it resolves its own repository.
            self.settings = HookctlSettings.model_construct(**cli_flags)

        from hookctl.config.logging import configure_logging

        configure_logging(verbose=self.settings.verbose, log_json=self.settings.log_json)

    def settings_for(self, repo_root: Path) -> HookctlSettings:
        """Settings resolved for *repo_root* with the same global flags."""
        return HookctlSettings.from_cli(
            config_path=self._config_path,
            repo_root=repo_root,
            **self._cli_flags,
        )

    def emit(self, result: ServiceResult, *, silent: bool = False) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout (unless *silent*),
          returns normally. Warnings go to stderr so they don't pollute
          piped output. A success may still carry a non-zero exit code.
        * Failure: writes to stderr, exits with ``result.exit_code``.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        if result.ok:
            if not silent:
                click.echo(format_result(result, settings=settings))
                # In JSON mode, warnings are already in the serialized payload.
                if not settings.json_output:
                    for warning in result.warnings:
                        click.echo(f"WARNING: {warning}", err=True)
            if result.exit_code:
                raise SystemExit(result.exit_code)
            return
        click.echo(format_result(result, settings=settings), err=True)
        raise SystemExit(result.exit_code or 1)
