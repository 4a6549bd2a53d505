"""Filesystem layout under a repository's control directory.

Every path derives from an explicit repository root, never from the
process working directory::

    <root>/.git/hooks/<hook>             generated hook shims
    <root>/.git/hookctl/registry.py      generated registry file
    <root>/.git/hookctl/staged/          ephemeral staged mirror
    <root>/.hookctl/actions/*.py         project-local action plugins
"""

from __future__ import annotations

from pathlib import Path

GIT_FOLDER = ".git"
HOOKS_FOLDER = "hooks"
CONTROL_FOLDER = "hookctl"
REGISTRY_FILENAME = "registry.py"
MIRROR_FOLDER = "staged"
DEFAULT_LOCAL_ACTIONS = ".hookctl/actions"


class RepoPaths:
    """Resolved paths for one repository root."""

    def __init__(self, root: Path | str, *, local_actions: str = DEFAULT_LOCAL_ACTIONS) -> None:
        self.root = Path(root).resolve()
        self._local_actions = local_actions

    @property
    def git_dir(self) -> Path:
        return self.root / GIT_FOLDER

    @property
    def hooks_dir(self) -> Path:
        return self.git_dir / HOOKS_FOLDER

    @property
    def control_dir(self) -> Path:
        return self.git_dir / CONTROL_FOLDER

    @property
    def registry_file(self) -> Path:
        return self.control_dir / REGISTRY_FILENAME

    @property
    def mirror_dir(self) -> Path:
        return self.control_dir / MIRROR_FOLDER

    @property
    def local_actions_dir(self) -> Path:
        return self.root / self._local_actions

    def hook_path(self, hook: str) -> Path:
        """Path of the shim Git runs for *hook*."""
        return self.hooks_dir / hook
