"""BaseAction — the envelope every contributed hook action runs in.

The dispatcher creates one instance per registry entry and per run::

    with action_cls(hook, root, console=console, git=git) as action:
        action.init()
        outcome = getattr(action, method)(*hook_args)
        action.shutdown()

Leaving the ``with`` block always removes the staged mirror the instance
may have created, whether or not ``shutdown`` ran.

An action vetoes the Git operation by *returning* the value of
:meth:`BaseAction.error` (or :meth:`BaseAction.success` with an exit code)
from its target method. The dispatcher stops at the first :class:`Abort`.
"""

from __future__ import annotations

import glob
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Any, Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from hookctl.infrastructure.git import GitBridge
from hookctl.infrastructure.paths import RepoPaths
from hookctl.infrastructure.staged import DEFAULT_CHUNK_SIZE, StagedFileResolver

logger = logging.getLogger(__name__)

# "Do not halt" value for error()/success().
NO_EXIT = None

ACTION_THEME = Theme(
    {
        "hook.ok": "bold green",
        "hook.error": "bold red",
        "hook.name": "bold cyan",
    }
)


@dataclass(frozen=True)
class Abort:
    """Returned by a target method to stop dispatch with *exit_code*."""

    exit_code: int
    message: str = ""


@runtime_checkable
class HookAction(Protocol):
    """Structural interface the dispatcher relies on."""

    hook: str
    root: Path

    def init(self) -> None: ...

    def shutdown(self) -> None: ...

    def close(self) -> None: ...

    def __enter__(self) -> Any: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...


def default_console() -> Console:
    """Console used when none is injected: stderr, so Git's stdout stays clean."""
    return Console(stderr=True, theme=ACTION_THEME, highlight=False)


class BaseAction:
    """Base class for hook actions.

    Subclasses add one or more target methods (``run`` by convention) and
    may override :meth:`init` and :meth:`shutdown`.

    Attributes:
        hook: Name of the Git hook that was triggered.
        root: Absolute path to the repository root.
        console: Rich console for user-facing messages.
        git: Git Bridge pinned to ``root``.
    """

    #: Top-level directories under root that :meth:`recursive_glob` skips.
    glob_excludes: frozenset[str] = frozenset({"vendor", ".git", ".venv", "node_modules"})

    def __init__(
        self,
        hook: str,
        root: Path | str,
        *,
        console: Console | None = None,
        git: GitBridge | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.hook = hook
        self.root = Path(root).resolve()
        self.console = console or default_console()
        self.git = git or GitBridge(self.root)
        self._chunk_size = chunk_size
        self._resolver: StagedFileResolver | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Run once before the target method. Does nothing by default."""

    def shutdown(self) -> None:
        """Run once after the target method completes. Does nothing by default."""

    def close(self) -> None:
        """Release resources owned by this instance (the staged mirror)."""
        if self._resolver is not None:
            self._resolver.cleanup()
            self._resolver = None

    def __enter__(self) -> BaseAction:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Git helpers
    # ------------------------------------------------------------------

    def resolve_diff_base(self) -> str:
        """``HEAD``, or the empty-tree hash before the first commit."""
        return self.git.resolve_diff_base()

    def get_staged_files(
        self,
        pattern: str | None = None,
        mirror_staged_changes: bool = True,
    ) -> list[Path]:
        """Absolute paths holding the staged content of each staged file.

        Args:
            pattern: Regular expression to filter relative paths with.
            mirror_staged_changes: When True (default), files edited after
                staging resolve to a mirror holding the staged content.
                When False, working-tree paths are returned.
        """
        if self._resolver is None:
            paths = RepoPaths(self.root)
            self._resolver = StagedFileResolver(
                self.git,
                self.root,
                paths.mirror_dir,
                chunk_size=self._chunk_size,
            )
        return self._resolver.staged_files(
            pattern or None,
            mirror_staged_changes=mirror_staged_changes,
        )

    def recursive_glob(self, pattern: str | Path) -> list[Path]:
        """Match *pattern*'s basename in its directory and every sub-directory.

        Matches in a directory come before matches in its sub-directories;
        sub-directories are visited in sorted order. Excluded top-level
        directories (see :attr:`glob_excludes`) are never entered.
        """
        pattern = Path(pattern)
        directory, name = pattern.parent, pattern.name
        found = sorted(Path(p) for p in glob.glob(str(directory / name)))

        try:
            subdirs = sorted(entry for entry in directory.iterdir() if entry.is_dir())
        except OSError:
            return found

        for subdir in subdirs:
            if subdir.parent.resolve() == self.root and subdir.name in self.glob_excludes:
                continue
            found.extend(self.recursive_glob(subdir / name))
        return found

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def error(self, message: str, exit_code: int | None = 1) -> Abort | None:
        """Report an error; return an :class:`Abort` unless *exit_code* is None."""
        self.console.print(f"[hook.error]✗[/] [hook.name]{self.hook}[/] {escape(message)}")
        return self._outcome(message, exit_code)

    def success(self, message: str, exit_code: int | None = NO_EXIT) -> Abort | None:
        """Report success; return an :class:`Abort` if *exit_code* is given."""
        self.console.print(f"[hook.ok]✓[/] [hook.name]{self.hook}[/] {escape(message)}")
        return self._outcome(message, exit_code)

    def _outcome(self, message: str, exit_code: int | None) -> Abort | None:
        if exit_code is NO_EXIT:
            return None
        logger.debug("%s requested exit %s: %s", type(self).__name__, exit_code, message)
        return Abort(exit_code=exit_code, message=message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(hook={self.hook!r}, root={os.fspath(self.root)!r})"
