"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus local directory discovery from ``.hookctl/actions/``.
Capabilities: action registration table, install-time hook metadata.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pluggy

from hookctl.plugins.hookspecs import HookctlSpec

PROJECT_NAME = "hookctl"
ENTRY_POINT_GROUP = "hookctl.actions"

logger = logging.getLogger(__name__)

ActionFactory = Callable[..., Any]


class PluginManager:
    """Manages plugin discovery, loading, and the action table."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(HookctlSpec)
        self._loaded: bool = False

    def discover_and_load(
        self,
        *,
        local_dir: Path | None = None,
        blocked: Iterable[str] = (),
    ) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Uses pluggy's native setuptools entry_point discovery for the
        ``hookctl.actions`` group, then scans *local_dir* (typically
        ``.hookctl/actions/``) for single-file Python plugins. Names in
        *blocked* are never registered.

        Returns a list of loaded plugin names.
        """
        for name in blocked:
            self._pm.set_blocked(name)
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception:
            logger.warning("Failed to load entry-point plugins", exc_info=True)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. in tests)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay."""
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        """Return all registered plugins."""
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Contributions
    # ------------------------------------------------------------------

    def action_table(self) -> dict[str, ActionFactory]:
        """Merge every plugin's ``register_actions`` contribution.

        The first plugin to claim a key wins; later claims are warned about
        and ignored.
        """
        table: dict[str, ActionFactory] = {}
        owners: dict[str, str] = {}
        for plugin_name, contribution in self._collect("register_actions"):
            for key, factory in contribution.items():
                if not isinstance(key, str) or not callable(factory):
                    logger.warning(
                        "Skipping action registration %r from plugin %s",
                        key,
                        plugin_name,
                    )
                    continue
                if key in table:
                    logger.warning(
                        "Action %r from plugin %s is already registered by %s",
                        key,
                        plugin_name,
                        owners[key],
                    )
                    continue
                table[key] = factory
                owners[key] = plugin_name
        return table

    def hook_entries(self) -> list[tuple[str, str, str]]:
        """Every declared hook entry as ``(plugin_name, hook_key, reference)``."""
        entries: list[tuple[str, str, str]] = []
        for plugin_name, contribution in self._collect("register_hook_entries"):
            for key, refs in contribution.items():
                if isinstance(refs, str):
                    refs = [refs]
                if not isinstance(refs, list) or not all(isinstance(r, str) for r in refs):
                    logger.warning(
                        "Skipping hook entry %r from plugin %s: expected a reference list",
                        key,
                        plugin_name,
                    )
                    continue
                entries.extend((plugin_name, key, ref) for ref in refs)
        return entries

    def _collect(self, hook_name: str) -> list[tuple[str, dict[str, Any]]]:
        """Call *hook_name* on each plugin separately so one failure stays isolated."""
        results: list[tuple[str, dict[str, Any]]] = []
        for plugin in self._pm.get_plugins():
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            hook = getattr(plugin, hook_name, None)
            if hook is None:
                continue
            try:
                contribution = hook()
            except Exception:
                logger.warning(
                    "Failed to collect %s from plugin %s",
                    hook_name,
                    plugin_name,
                    exc_info=True,
                )
                continue
            if contribution is None:
                continue
            if not isinstance(contribution, dict):
                logger.warning(
                    "Plugin %s returned a non-dict from %s",
                    plugin_name,
                    hook_name,
                )
                continue
            results.append((plugin_name, contribution))
        return results

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module. Classes inside the module that carry pluggy hookimpl-decorated
        methods are instantiated and registered.

        Errors are logged as warnings but never raised; a broken local plugin
        must not prevent the other actions from running.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"hookctl_local_plugin_{py_file.stem}"
            if self._pm.is_blocked(module_name):
                continue
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                # Clean up partial module registration
                sys.modules.pop(module_name, None)
                continue

            # Scan module for classes that have hookimpl-decorated methods
            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue  # skip imported classes
                if not self._has_hook_impls(obj):
                    continue
                try:
                    instance = obj()
                    self.register_plugin(instance, name=module_name)
                    logger.debug(
                        "Loaded local plugin %s from %s",
                        obj.__name__,
                        py_file,
                    )
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook calls
        against class objects leave ``self`` unbound and fail at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("hookctl")`` sets a ``hookctl_impl``
        attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "hookctl_impl", None):
                return True
        return False
