"""Persisted registry form.

The install step writes ``.git/hookctl/registry.py``: a generated Python
module holding a literal ``HOOKS`` mapping. It is regenerated wholesale on
every install and loaded fresh, via ``importlib``, by every dispatch.
"""

from __future__ import annotations

import importlib.util
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path

from hookctl.domain.registry import Registry
from hookctl.errors import ConfigurationError, RegistryUnreadable

logger = logging.getLogger(__name__)

_MODULE_NAME = "hookctl_registry"


def render_registry(registry: Registry, *, timestamp: datetime | None = None) -> str:
    """Render *registry* as the source of a generated registry module."""
    stamp = (timestamp or datetime.now(UTC)).isoformat(timespec="seconds")
    lines = [
        "# hookctl registry file.",
        "# Do not edit, this file is generated automatically.",
        f"# Timestamp: {stamp}",
        "",
        "HOOKS = {",
    ]
    for hook, buckets in registry.to_mapping().items():
        if not buckets:
            lines.append(f"    {hook!r}: {{}},")
            continue
        lines.append(f"    {hook!r}: {{")
        for priority, refs in buckets.items():
            lines.append(f"        {priority}: [")
            lines.extend(f"            {ref!r}," for ref in refs)
            lines.append("        ],")
        lines.append("    },")
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_registry(path: Path, registry: Registry) -> Path:
    """Write the registry file, creating its directory if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_registry(registry), encoding="utf-8")
    # Bytecode from an earlier write can share this file's mtime and size.
    Path(importlib.util.cache_from_source(str(path))).unlink(missing_ok=True)
    logger.debug("Wrote registry with %d entries to %s", len(registry), path)
    return path


def load_registry(path: Path) -> Registry:
    """Load a registry snapshot from a generated registry file.

    Raises:
        RegistryUnreadable: If the file is missing, cannot be executed, or
            does not hold a valid ``HOOKS`` mapping.
    """
    if not path.is_file():
        msg = f"Registry file {path} does not exist"
        raise RegistryUnreadable(msg)

    spec = importlib.util.spec_from_file_location(_MODULE_NAME, path)
    if spec is None or spec.loader is None:
        msg = f"Could not create module spec for {path}"
        raise RegistryUnreadable(msg)
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        msg = f"Registry file {path} could not be loaded: {exc}"
        raise RegistryUnreadable(msg) from exc

    hooks = getattr(module, "HOOKS", None)
    if not isinstance(hooks, Mapping):
        msg = f"Registry file {path} does not define a HOOKS mapping"
        raise RegistryUnreadable(msg)
    try:
        return Registry.from_mapping(hooks)
    except ConfigurationError as exc:
        msg = f"Registry file {path} is malformed: {exc}"
        raise RegistryUnreadable(msg) from exc
