"""Config file discovery.

Walk-up finder locates hookctl.toml, bounded by the repository that owns
the starting directory so a stray file above it never applies.
Supports HOOKCTL_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "hookctl.toml"
CONFIG_ENV_VAR = "HOOKCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for hookctl.toml.

    Returns the path to the config file, or None if not found. The walk
    stops at the first directory containing ``.git``. Checks
    HOOKCTL_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if (current / ".git").exists():
            break
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None
