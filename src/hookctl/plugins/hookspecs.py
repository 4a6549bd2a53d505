"""Pluggy hook specifications for hookctl action packages.

An action package contributes two things:

* a registration table mapping stable action keys to action classes, read
  by the dispatcher when it resolves ``"key::method"`` references;
* declarative hook metadata, read once at install time to build the
  registry file.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from hookctl.actions.base import BaseAction

hookspec = pluggy.HookspecMarker("hookctl")


class HookctlSpec:
    """Hook specifications for the hookctl plugin system."""

    @hookspec
    def register_actions(self) -> dict[str, type[BaseAction]] | None:
        """Return action key -> action class mappings."""

    @hookspec
    def register_hook_entries(self) -> dict[str, str | list[str]] | None:
        """Return ``{"<priority>.<hook>" | "<hook>": "key::method" | [...]}``."""
