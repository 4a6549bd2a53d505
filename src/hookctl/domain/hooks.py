"""Supported Git hook names.

The set is closed: the registry file always lists every member, and the
installer writes one shim per member. Dispatch for any other name is a no-op.
"""

from __future__ import annotations

from enum import StrEnum


class HookName(StrEnum):
    """Git lifecycle events that hookctl can dispatch."""

    APPLYPATCH_MSG = "applypatch-msg"
    PRE_APPLYPATCH = "pre-applypatch"
    POST_APPLYPATCH = "post-applypatch"
    PRE_COMMIT = "pre-commit"
    PREPARE_COMMIT_MSG = "prepare-commit-msg"
    COMMIT_MSG = "commit-msg"
    POST_COMMIT = "post-commit"
    PRE_REBASE = "pre-rebase"
    POST_CHECKOUT = "post-checkout"
    POST_MERGE = "post-merge"
    POST_UPDATE = "post-update"
    PRE_AUTO_GC = "pre-auto-gc"
    POST_REWRITE = "post-rewrite"
    PRE_PUSH = "pre-push"


def supported_hooks() -> list[str]:
    """All supported hook names in their canonical order."""
    return [hook.value for hook in HookName]


def is_supported(name: str) -> bool:
    """Whether *name* is one of the supported Git hooks."""
    return name in HookName._value2member_map_
