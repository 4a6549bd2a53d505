"""Exception hierarchy for hookctl.

Git errors propagate to whoever asked Git the question. Configuration and
registry errors are handled locally by the dispatcher: the offending entry
is skipped, or dispatch fails open with exit code 0.
"""

from __future__ import annotations


class HookctlError(Exception):
    """Base class for all hookctl errors."""


class GitError(HookctlError):
    """A Git Bridge call failed."""

    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class NotAGitRepository(GitError):
    """The pinned root is not a Git repository."""


class UnexpectedGitError(GitError):
    """Git exited with a code that has no specific meaning for the command."""


class DiffIndexError(GitError):
    """``git diff-index`` reported an error (exit code 2)."""


class ConfigurationError(HookctlError):
    """Malformed action reference, unknown hook, or unresolvable action."""


class UnresolvedAction(ConfigurationError):
    """A registry entry names an action or method no installed plugin provides."""


class RegistryUnreadable(HookctlError):
    """The persisted registry file is missing or cannot be parsed."""
