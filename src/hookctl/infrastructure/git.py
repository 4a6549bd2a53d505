"""Git Bridge — the single point of contact with the ``git`` binary.

Every call pins ``LC_ALL`` to a UTF-8 locale and passes explicit
``--git-dir``/``--work-tree`` flags, so results do not depend on the
caller's locale or working directory. Calls block until Git exits; there
is no timeout.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from pathlib import Path

from hookctl.errors import DiffIndexError, NotAGitRepository, UnexpectedGitError

logger = logging.getLogger(__name__)

HEAD = "HEAD"
# Git's well-known hash of the empty tree, used to diff against "nothing".
EMPTY_TREE_HASH = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

# General exit codes.
SUCCESS = 0
UNEXPECTED_ERROR = 128

# Exit codes for `rev-parse --verify --quiet`.
REV_PARSE_NOT_FOUND = 1

# Exit codes for `diff-index`.
DIFF_INDEX_NO_FILES_FOUND = 1
DIFF_INDEX_ERROR = 2


class GitBridge:
    """Run Git commands pinned to one repository root."""

    def __init__(
        self,
        root: Path | str,
        *,
        binary: str = "git",
        locale: str = "C.UTF-8",
    ) -> None:
        self.root = Path(root).resolve()
        self.binary = binary
        self.locale = locale

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def command(self, *args: str) -> list[str]:
        """Build the full argument vector for a Git call."""
        return [
            self.binary,
            f"--git-dir={self.root / '.git'}",
            f"--work-tree={self.root}",
            *args,
        ]

    def _environment(self) -> dict[str, str]:
        env = os.environ.copy()
        env["LC_ALL"] = self.locale
        # Hook environments export these; they would override our flags.
        env.pop("GIT_DIR", None)
        env.pop("GIT_WORK_TREE", None)
        return env

    def run(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run a Git command and return the completed process (never checked).

        Raises:
            UnexpectedGitError: If the Git binary cannot be executed.
        """
        argv = self.command(*args)
        logger.debug("Running %s", " ".join(argv))
        try:
            return subprocess.run(
                argv,
                cwd=self.root,
                env=self._environment(),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="surrogateescape",
                check=False,
            )
        except OSError as exc:
            msg = f"Could not execute {self.binary!r}: {exc}"
            raise UnexpectedGitError(msg) from exc

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def resolve_diff_base(self) -> str:
        """Return the tree-ish to diff the index against.

        ``HEAD`` once the repository has a commit, otherwise the empty-tree
        hash.

        Raises:
            NotAGitRepository: If the root is not a Git repository.
            UnexpectedGitError: For any other unexpected exit code.
        """
        result = self.run("rev-parse", "--verify", "--quiet", HEAD)
        if result.returncode == UNEXPECTED_ERROR:
            msg = f"{self.root} is not a Git repository"
            raise NotAGitRepository(msg, returncode=result.returncode, stderr=result.stderr)
        if result.returncode not in (SUCCESS, REV_PARSE_NOT_FOUND):
            msg = f"Finding the HEAD commit returned exit code {result.returncode}"
            raise UnexpectedGitError(msg, returncode=result.returncode, stderr=result.stderr)
        if result.returncode == SUCCESS and result.stdout.strip():
            return HEAD
        return EMPTY_TREE_HASH

    def list_staged_paths(self, diff_base: str, pattern: str | None = None) -> list[str]:
        """Relative paths of added, copied, modified, or renamed staged files.

        Args:
            diff_base: ``HEAD`` or the empty-tree hash.
            pattern: Optional regular expression; only matching paths are kept.

        Raises:
            DiffIndexError: If ``diff-index`` exits with code 2.
            NotAGitRepository: If the root is not a Git repository.
            UnexpectedGitError: For any other non-zero exit code.
        """
        result = self.run(
            "diff-index",
            "--cached",
            "--name-only",
            "-z",
            "--diff-filter=ACMR",
            diff_base,
        )
        if result.returncode == DIFF_INDEX_ERROR:
            msg = "Fetching staged files returned an error"
            raise DiffIndexError(msg, returncode=result.returncode, stderr=result.stderr)
        if result.returncode == DIFF_INDEX_NO_FILES_FOUND:
            return []
        if result.returncode == UNEXPECTED_ERROR:
            msg = f"{self.root} is not a Git repository"
            raise NotAGitRepository(msg, returncode=result.returncode, stderr=result.stderr)
        if result.returncode != SUCCESS:
            msg = f"Listing staged files returned exit code {result.returncode}"
            raise UnexpectedGitError(msg, returncode=result.returncode, stderr=result.stderr)

        # NUL-separated output leaves paths unquoted regardless of core.quotePath.
        paths = [path for path in result.stdout.split("\0") if path]
        if pattern:
            regex = re.compile(pattern)
            paths = [path for path in paths if regex.search(path)]
        return paths

    def checkout_index_to(self, mirror_dir: Path) -> bool:
        """Materialize the full staged index under *mirror_dir*.

        Returns False (after logging) when Git fails; callers fall back to
        working-tree paths for anything missing from the mirror.
        """
        prefix = f"{Path(mirror_dir).resolve()}{os.sep}"
        try:
            result = self.run("checkout-index", f"--prefix={prefix}", "-af")
        except UnexpectedGitError as exc:
            logger.warning("git checkout-index failed: %s", exc)
            return False
        if result.returncode != SUCCESS:
            logger.warning(
                "git checkout-index exited with %s: %s",
                result.returncode,
                result.stderr.strip(),
            )
            return False
        return True
