"""Staged File Resolver — readable paths for exactly what is staged.

In cheap mode the working-tree paths are returned as-is. In mirror mode
the index is checked out into a scratch directory and each file is
compared byte-for-byte with its working-tree copy: identical files keep
their working-tree path, files edited after staging point into the
mirror. Consumers never need to know which one they got.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from types import TracebackType

from hookctl.infrastructure.git import GitBridge

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8192


def files_equal(a: Path, b: Path, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bool:
    """Whether two files hold byte-identical content.

    Files of different size are unequal without reading either one.
    Content is streamed in *chunk_size* blocks and the comparison stops at
    the first differing block. A missing file never equals anything.
    """
    if not a.is_file() or not b.is_file():
        return False
    if a.stat().st_size != b.stat().st_size:
        return False
    with a.open("rb") as fa, b.open("rb") as fb:
        while True:
            chunk_a = fa.read(chunk_size)
            chunk_b = fb.read(chunk_size)
            if chunk_a != chunk_b:
                return False
            if not chunk_a:
                return True


class StagedMirror:
    """Scratch directory holding a checkout of the current index.

    Use as a context manager, or call :meth:`prepare` / :meth:`cleanup`
    explicitly. Cleanup is idempotent.
    """

    def __init__(self, git: GitBridge, path: Path) -> None:
        self._git = git
        self.path = path
        self.checked_out = False

    def prepare(self) -> Path:
        """Empty (or create) the mirror directory and check the index out into it."""
        self.cleanup()
        self.path.mkdir(parents=True, exist_ok=True)
        self.checked_out = self._git.checkout_index_to(self.path)
        return self.path

    def cleanup(self) -> None:
        """Remove the mirror directory if it exists."""
        if self.path.exists():
            shutil.rmtree(self.path, ignore_errors=True)
            logger.debug("Removed staged mirror %s", self.path)
        self.checked_out = False

    def __enter__(self) -> StagedMirror:
        self.prepare()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()


class StagedFileResolver:
    """Resolve staged files for one repository.

    The mirror, once created, belongs to this resolver; :meth:`cleanup`
    removes it.
    """

    def __init__(
        self,
        git: GitBridge,
        root: Path,
        mirror_dir: Path,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._git = git
        self.root = Path(root).resolve()
        self._mirror = StagedMirror(git, mirror_dir)
        self._chunk_size = chunk_size
        self._mirror_created = False

    @property
    def mirror_dir(self) -> Path:
        return self._mirror.path

    def staged_files(
        self,
        pattern: str | None = None,
        *,
        mirror_staged_changes: bool = True,
    ) -> list[Path]:
        """Absolute paths to the staged version of each staged file.

        Args:
            pattern: Optional regular expression the relative path must match.
            mirror_staged_changes: When False, return working-tree paths
                without checking the index out.
        """
        diff_base = self._git.resolve_diff_base()
        relative = self._git.list_staged_paths(diff_base, pattern)

        if not mirror_staged_changes:
            return [self.root / path for path in relative]
        if not relative:
            return []

        self._mirror.prepare()
        self._mirror_created = True
        return [self._resolve(path) for path in relative]

    def _resolve(self, relative: str) -> Path:
        working = self.root / relative
        mirrored = self.mirror_dir / relative
        if files_equal(working, mirrored, chunk_size=self._chunk_size):
            return working
        if mirrored.is_file():
            return mirrored
        logger.debug("No mirrored copy of %s, using working tree", relative)
        return working

    def cleanup(self) -> None:
        """Delete the mirror if this resolver created it."""
        if self._mirror_created:
            self._mirror.cleanup()
            self._mirror_created = False
