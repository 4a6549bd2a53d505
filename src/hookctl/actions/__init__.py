"""Action contract — what every contributed hook action implements."""

from hookctl.actions.base import NO_EXIT, Abort, BaseAction, HookAction

__all__ = ["NO_EXIT", "Abort", "BaseAction", "HookAction"]
