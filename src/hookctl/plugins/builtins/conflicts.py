"""Built-in plugin: refuse commits that still contain merge-conflict markers.

Registers the ``conflict-markers`` action key but declares no hook entries,
so nothing runs until a project opts in::

    # hookctl.toml
    [hooks]
    "5.pre-commit" = "conflict-markers::run"

The check reads the staged content (via the staged mirror), so a marker
fixed in the working tree but not re-staged still blocks the commit.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import pluggy

from hookctl.actions.base import Abort, BaseAction
from hookctl.infrastructure.paths import RepoPaths

hookimpl = pluggy.HookimplMarker("hookctl")

logger = logging.getLogger(__name__)

ACTION_KEY = "conflict-markers"

_MARKER = re.compile(rb"^(<{7}|={7}|>{7})(?: |\r?$)", re.MULTILINE)
# Files with a NUL byte in the first block are treated as binary and skipped.
_BINARY_SNIFF = 8000


def find_conflict_markers(path: Path) -> list[int]:
    """Line numbers (1-based) in *path* that start with a conflict marker."""
    data = path.read_bytes()
    if b"\0" in data[:_BINARY_SNIFF]:
        return []
    lines: list[int] = []
    for match in _MARKER.finditer(data):
        lines.append(data.count(b"\n", 0, match.start()) + 1)
    return lines


class ConflictMarkersAction(BaseAction):
    """Block the commit when a staged file contains conflict markers."""

    def run(self, *hook_args: str) -> Abort | None:
        offenders: list[str] = []
        for path in self.get_staged_files():
            try:
                lines = find_conflict_markers(path)
            except OSError as exc:
                logger.debug("Could not read %s: %s", path, exc)
                continue
            if lines:
                relative = self._display_path(path)
                offenders.append(f"{relative}:{','.join(str(n) for n in lines)}")

        if offenders:
            return self.error(
                "Conflict markers found in staged files: " + "; ".join(offenders),
                exit_code=1,
            )
        logger.debug("No conflict markers in staged files")
        return None

    def _display_path(self, path: Path) -> str:
        for base in (RepoPaths(self.root).mirror_dir, self.root):
            if path.is_relative_to(base):
                return path.relative_to(base).as_posix()
        return str(path)


class ConflictMarkersPlugin:
    """Entry-point plugin exposing :class:`ConflictMarkersAction`."""

    @hookimpl
    def register_actions(self) -> dict[str, type[BaseAction]]:
        return {ACTION_KEY: ConflictMarkersAction}
