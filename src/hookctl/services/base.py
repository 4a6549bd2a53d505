"""BaseService — shared foundation for hookctl services.

Every service receives the resolved :class:`HookctlSettings`. Plugins are
loaded lazily, once per service instance, from entry points and the
repository's local action directory.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hookctl.infrastructure.git import GitBridge
from hookctl.infrastructure.paths import RepoPaths
from hookctl.plugins.manager import PluginManager

if TYPE_CHECKING:
    from pathlib import Path

    from hookctl.config.settings import HookctlSettings

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    A pre-built *plugin_manager* (already populated) may be injected; it is
    then used as-is and no discovery runs.
    """

    def __init__(
        self,
        settings: HookctlSettings,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._plugins = plugin_manager

    def _paths(self, root: Path) -> RepoPaths:
        return RepoPaths(root, local_actions=self._settings.plugins.local_dir)

    def _git(self, paths: RepoPaths) -> GitBridge:
        return GitBridge(
            paths.root,
            binary=self._settings.git.binary,
            locale=self._settings.git.locale,
        )

    def _plugin_manager(self, paths: RepoPaths) -> PluginManager:
        """Return the plugin manager, discovering plugins on first use."""
        if self._plugins is None:
            pm = PluginManager()
            names = pm.discover_and_load(
                local_dir=paths.local_actions_dir,
                blocked=self._settings.plugins.blocked,
            )
            logger.debug("Loaded plugins: %s", ", ".join(names) or "none")
            self._plugins = pm
        return self._plugins
