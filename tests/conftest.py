"""Shared pytest fixtures and test helpers for hookctl tests."""

from __future__ import annotations

import logging
import subprocess
import textwrap
from collections.abc import Generator
from io import StringIO
from pathlib import Path

import pytest
from click.testing import CliRunner
from rich.console import Console

from hookctl.config.settings import HookctlSettings


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of config and Git resolution."""
    for name in ("HOOKCTL_CONFIG", "GIT_DIR", "GIT_WORK_TREE", "GIT_INDEX_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """The CLI reconfigures logging; put the root logger back afterwards."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    hookctl_logger = logging.getLogger("hookctl")
    hookctl_level = hookctl_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    hookctl_logger.setLevel(hookctl_level)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Freshly initialized Git repository without any commit."""
    root = tmp_path / "repo"
    root.mkdir()
    git(root, "init", "--quiet")
    git(root, "config", "user.email", "test@test.com")
    git(root, "config", "user.name", "Test")
    git(root, "config", "commit.gpgsign", "false")
    return root.resolve()


@pytest.fixture
def committed_repo(git_repo: Path) -> Path:
    """Git repository with one commit, so HEAD exists."""
    commit_file(git_repo, "README.md", "hello\n")
    return git_repo


@pytest.fixture
def settings(git_repo: Path) -> HookctlSettings:
    """Default settings pinned to ``git_repo``."""
    return HookctlSettings.from_cli(repo_root=git_repo)


@pytest.fixture
def console() -> Console:
    """Rich console that records to a buffer instead of the terminal."""
    return Console(file=StringIO(), width=200, no_color=True, highlight=False)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def git(root: Path, *args: str) -> str:
    """Run a Git command in *root*, asserting success."""
    result = subprocess.run(
        ["git", *args],
        cwd=root,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def stage_file(root: Path, relative: str, content: str) -> Path:
    """Write *content* to *relative* and stage it."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    git(root, "add", relative)
    return path


def commit_file(root: Path, relative: str, content: str, message: str = "commit") -> Path:
    """Write, stage, and commit *relative*."""
    path = stage_file(root, relative, content)
    git(root, "commit", "--quiet", "--no-verify", "-m", message)
    return path


def console_text(console: Console) -> str:
    """Everything printed to a buffer-backed console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def write_local_plugin(root: Path, name: str, source: str) -> Path:
    """Drop a single-file plugin into the repository's ``.hookctl/actions/``."""
    plugin_dir = root / ".hookctl" / "actions"
    plugin_dir.mkdir(parents=True, exist_ok=True)
    path = plugin_dir / f"{name}.py"
    path.write_text(textwrap.dedent(source), encoding="utf-8")
    return path


# A local plugin shared by the service and command tests. Every action call
# is appended to ``<root>/calls.log`` so ordering can be asserted from disk.
RECORDING_PLUGIN = """\
    from hookctl.actions import BaseAction
    from hookctl.plugins import hookimpl


    class Recorder(BaseAction):
        def _record(self, label, args):
            with open(self.root / "calls.log", "a", encoding="utf-8") as fh:
                fh.write(label + " " + " ".join(args) + "\\n")

        def first(self, *args):
            self._record("first", args)

        def second(self, *args):
            self._record("second", args)

        def veto(self, *args):
            self._record("veto", args)
            return self.error("vetoed", exit_code=3)

        def explode(self, *args):
            self._record("explode", args)
            raise RuntimeError("boom")


    class RecordingPlugin:
        @hookimpl
        def register_actions(self):
            return {"recorder": Recorder}

        @hookimpl
        def register_hook_entries(self):
            return {
                "20.pre-commit": "recorder::second",
                "5.pre-commit": "recorder::first",
            }
"""


def read_calls(root: Path) -> list[str]:
    """Lines written by the recording plugin, whitespace-trimmed."""
    log = root / "calls.log"
    if not log.exists():
        return []
    return [line.strip() for line in log.read_text(encoding="utf-8").splitlines()]
