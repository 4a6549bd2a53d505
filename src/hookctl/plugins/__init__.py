"""Extension layer — action packages register via pluggy.

Discovery: entry_points (pip-installed) in the ``hookctl.actions`` group,
plus single-file plugins in the project's ``.hookctl/actions/``.
INVARIANT: Plugin failures are warnings, never errors.
"""

import pluggy

from hookctl.plugins.manager import PROJECT_NAME, PluginManager

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)

__all__ = ["PluginManager", "hookimpl"]
