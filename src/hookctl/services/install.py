"""InstallService — build the registry file and the Git hook shims.

``install`` regenerates everything from scratch: the control directory is
emptied, the registry is rebuilt from plugin metadata and the ``[hooks]``
config table, and a shim is written for each configured hook. Existing
hooks that hookctl did not write are left alone unless forced.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import stat
import sys
from pathlib import Path

from hookctl.domain.hooks import is_supported
from hookctl.domain.registry import Registry, RegistryBuilder, parse_prioritized_hook
from hookctl.errors import ConfigurationError, RegistryUnreadable
from hookctl.infrastructure.paths import RepoPaths
from hookctl.infrastructure.registry_file import load_registry, write_registry
from hookctl.services.base import BaseService
from hookctl.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)

SHIM_MARKER = "# hookctl hook shim"

_SHIM_TEMPLATE = """\
#!/bin/sh
{marker} for {hook}.
# Do not edit, this file is generated automatically.
exec {python} -m hookctl run {hook} "$(git rev-parse --show-toplevel)" "$@"
"""


def render_shim(hook: str, python: str | None = None) -> str:
    """Shell script Git runs for *hook*; it hands over to ``hookctl run``."""
    return _SHIM_TEMPLATE.format(
        marker=SHIM_MARKER,
        hook=hook,
        python=shlex.quote(python or sys.executable),
    )


def is_hookctl_shim(path: Path) -> bool:
    """Whether *path* is a hook shim written by hookctl."""
    if path.is_symlink() or not path.is_file():
        return False
    try:
        head = path.read_text(encoding="utf-8", errors="replace")[:512]
    except OSError:
        return False
    return SHIM_MARKER in head


class InstallService(BaseService):
    """Install, uninstall, and inspect hookctl in a repository."""

    def build_registry(self, paths: RepoPaths) -> tuple[Registry, list[str]]:
        """Collect plugin metadata and ``[hooks]`` config into a registry.

        Malformed entries become warnings; they never abort the install.
        """
        builder = RegistryBuilder()
        warnings: list[str] = []

        for plugin_name, key, ref in self._plugin_manager(paths).hook_entries():
            self._add(builder, key, ref, source=f"plugin {plugin_name}", warnings=warnings)

        for key, refs in self._settings.hooks.items():
            for ref in [refs] if isinstance(refs, str) else refs:
                self._add(builder, key, ref, source="config", warnings=warnings)

        return builder.build(), warnings

    def install(self, root: Path | str, *, force: bool | None = None) -> ServiceResult:
        """Write the registry file and hook shims into *root*."""
        paths = self._paths(Path(root))
        if not paths.git_dir.is_dir():
            return self._not_a_repository("install", paths)
        force = self._settings.install.force if force is None else force

        if paths.control_dir.exists():
            logger.debug("Removing previous hookctl data at %s", paths.control_dir)
            shutil.rmtree(paths.control_dir)

        registry, warnings = self.build_registry(paths)
        write_registry(paths.registry_file, registry)

        paths.hooks_dir.mkdir(parents=True, exist_ok=True)
        installed: list[str] = []
        for hook in self._settings.install.hooks:
            if not is_supported(hook):
                warnings.append(f"Unknown Git hook {hook!r} in [install] hooks, skipped")
                continue
            target = paths.hook_path(hook)
            if (target.exists() or target.is_symlink()) and not is_hookctl_shim(target):
                if not force:
                    warnings.append(f"Existing {hook} hook is not managed by hookctl, kept")
                    continue
                logger.debug("Replacing existing %s hook", hook)
                target.unlink()
            self._write_shim(target, hook)
            installed.append(hook)

        return ServiceResult(
            ok=True,
            op="install",
            data={
                "root": str(paths.root),
                "registry": str(paths.registry_file),
                "entries": len(registry),
                "hooks": installed,
            },
            warnings=warnings,
        )

    def uninstall(self, root: Path | str) -> ServiceResult:
        """Remove hookctl shims and the control directory from *root*."""
        paths = self._paths(Path(root))
        if not paths.git_dir.is_dir():
            return self._not_a_repository("uninstall", paths)

        removed: list[str] = []
        if paths.hooks_dir.is_dir():
            for hook_file in sorted(paths.hooks_dir.iterdir()):
                if is_hookctl_shim(hook_file):
                    hook_file.unlink()
                    removed.append(hook_file.name)
        if paths.control_dir.exists():
            shutil.rmtree(paths.control_dir)

        return ServiceResult(
            ok=True,
            op="uninstall",
            data={"root": str(paths.root), "hooks": removed},
        )

    def list_entries(self, root: Path | str, hook: str | None = None) -> ServiceResult:
        """Report the persisted registry, optionally for a single hook."""
        paths = self._paths(Path(root))
        try:
            registry = load_registry(paths.registry_file)
        except RegistryUnreadable as exc:
            return ServiceResult(
                ok=False,
                op="list",
                error=ServiceError(code="REGISTRY_UNREADABLE", message=str(exc)),
            )

        hooks = [hook] if hook else registry.hooks()
        items = [
            {
                "hook": name,
                "priority": ref.priority,
                "action": ref.action,
                "method": ref.method,
            }
            for name in hooks
            for ref in registry.iter_entries(name)
        ]
        return ServiceResult(
            ok=True,
            op="list",
            data={"registry": str(paths.registry_file), "count": len(items), "items": items},
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _add(
        builder: RegistryBuilder,
        key: str,
        ref: str,
        *,
        source: str,
        warnings: list[str],
    ) -> None:
        try:
            hook, priority = parse_prioritized_hook(key)
            added = builder.add_entry(hook, ref, priority)
        except ConfigurationError as exc:
            logger.warning("Skipping hook entry %r from %s: %s", key, source, exc)
            warnings.append(f"Skipped {key} = {ref!r} from {source}: {exc}")
            return
        logger.debug("Adding %s to hook %s with priority %s (%s)", added, hook, priority, source)

    @staticmethod
    def _write_shim(target: Path, hook: str) -> None:
        target.write_text(render_shim(hook), encoding="utf-8")
        mode = target.stat().st_mode
        os.chmod(target, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    @staticmethod
    def _not_a_repository(op: str, paths: RepoPaths) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code="NOT_A_GIT_REPOSITORY",
                message=f"{paths.root} is not a Git repository",
                detail={"root": str(paths.root)},
            ),
        )
