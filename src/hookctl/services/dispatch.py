"""DispatchService — run every registered action for one Git hook.

Linear state machine, no retries:

1. Load the registry file. Unreadable -> warn and succeed (fail open).
2. Look up the hook's entries. None -> succeed without loading plugins.
3. For each entry in priority order: resolve the action key through the
   plugin action table, then ``init`` / target method / ``shutdown``
   inside the action's scope.

INVARIANT: A broken action is skipped, never fatal. Only an action that
returns :class:`~hookctl.actions.base.Abort` changes the exit code.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from hookctl.actions.base import Abort, BaseAction
from hookctl.domain.hooks import is_supported
from hookctl.errors import RegistryUnreadable, UnresolvedAction
from hookctl.infrastructure.registry_file import load_registry
from hookctl.services.base import BaseService
from hookctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from rich.console import Console

    from hookctl.config.settings import HookctlSettings
    from hookctl.domain.registry import ActionReference
    from hookctl.infrastructure.git import GitBridge
    from hookctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class DispatchService(BaseService):
    """Dispatch a Git hook event to its registered actions."""

    def __init__(
        self,
        settings: HookctlSettings,
        plugin_manager: PluginManager | None = None,
        *,
        console: Console | None = None,
    ) -> None:
        super().__init__(settings, plugin_manager)
        self._console = console

    def dispatch(self, hook: str, root: Path | str, args: Sequence[str] = ()) -> ServiceResult:
        """Run all actions registered for *hook* in repository *root*.

        *args* are the positional arguments Git passed to the hook; they are
        forwarded unchanged to every target method.
        """
        paths = self._paths(Path(root))
        warnings: list[str] = []
        ran: list[str] = []
        skipped: list[str] = []
        failed: list[str] = []

        def result(exit_code: int = 0, abort: tuple[str, Abort] | None = None) -> ServiceResult:
            data: dict[str, Any] = {
                "hook": hook,
                "exit_code": exit_code,
                "ran": ran,
                "skipped": skipped,
                "failed": failed,
                "aborted_by": abort[0] if abort else None,
            }
            if exit_code == 0:
                return ServiceResult(ok=True, op="dispatch", data=data, warnings=warnings)
            return ServiceResult(
                ok=False,
                op="dispatch",
                data=data,
                warnings=warnings,
                error=ServiceError(
                    code="ACTION_ABORTED",
                    message=abort[1].message if abort else "Dispatch aborted",
                    detail={"action": abort[0] if abort else None, "exit_code": exit_code},
                ),
            )

        if not is_supported(hook):
            logger.debug("Ignoring unsupported hook %r", hook)
            return result()

        try:
            registry = load_registry(paths.registry_file)
        except RegistryUnreadable as exc:
            logger.warning("Cannot read the hook registry, skipping git hooks: %s", exc)
            warnings.append(f"Hook registry unreadable: {exc}")
            return result()

        references = list(registry.iter_entries(hook))
        if not references:
            logger.debug("No actions registered for %s", hook)
            return result()

        table = self._plugin_manager(paths).action_table()
        git = self._git(paths)

        for ref in references:
            label = str(ref)
            try:
                factory = self._resolve(table, ref)
                outcome = self._run_action(factory, ref, hook, paths.root, git, args)
            except UnresolvedAction as exc:
                logger.warning("Cannot resolve %s, skipping: %s", label, exc)
                warnings.append(f"Skipped {label}: {exc}")
                skipped.append(label)
                continue
            except Exception as exc:
                logger.warning(
                    "Action %s failed on %s, skipping",
                    label,
                    hook,
                    exc_info=True,
                )
                warnings.append(f"Action {label} failed: {exc}")
                failed.append(label)
                continue

            ran.append(label)
            if isinstance(outcome, Abort):
                logger.debug("Action %s aborted %s with exit %s", label, hook, outcome.exit_code)
                return result(outcome.exit_code, (label, outcome))

        return result()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve(table: dict[str, Callable[..., Any]], ref: ActionReference) -> Callable[..., Any]:
        factory = table.get(ref.action)
        if factory is None:
            msg = f"No installed plugin provides action {ref.action!r}"
            raise UnresolvedAction(msg)
        return factory

    def _run_action(
        self,
        factory: Callable[..., Any],
        ref: ActionReference,
        hook: str,
        root: Path,
        git: GitBridge,
        args: Sequence[str],
    ) -> Any:
        """Create the action, run its lifecycle, and always release its scope."""
        kwargs: dict[str, Any] = {"console": self._console, "git": git}
        if isinstance(factory, type) and issubclass(factory, BaseAction):
            kwargs["chunk_size"] = self._settings.staged.chunk_size

        with factory(hook, root, **kwargs) as action:
            method = getattr(action, ref.method, None)
            if method is None or not callable(method) or ref.method.startswith("_"):
                msg = f"Action {ref.action!r} has no method {ref.method!r}"
                raise UnresolvedAction(msg)
            action.init()
            outcome = method(*args)
            action.shutdown()
        return outcome
