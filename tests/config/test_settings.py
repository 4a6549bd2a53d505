"""Tests for HookctlSettings — unified settings with TOML source."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from hookctl.config.settings import HookctlSettings


class TestHookctlSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = HookctlSettings.from_cli(repo_root=tmp_path)
        assert settings.repo_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.git.binary == "git"
        assert settings.git.locale == "C.UTF-8"
        assert settings.staged.chunk_size == 8192
        assert settings.plugins.local_dir == ".hookctl/actions"
        assert len(settings.install.hooks) == 14
        assert settings.hooks == {}

    def test_frozen(self, tmp_path: Path) -> None:
        settings = HookctlSettings.from_cli(repo_root=tmp_path)
        with pytest.raises(Exception):  # noqa: B017
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "hookctl.toml").write_text(
            '[git]\nbinary = "/usr/local/bin/git"\n'
            '[hooks]\n"5.pre-commit" = "conflict-markers::run"\n'
            'commit-msg = ["msg::check", "msg::lint"]\n',
            encoding="utf-8",
        )
        settings = HookctlSettings.from_cli(repo_root=tmp_path)
        assert settings.git.binary == "/usr/local/bin/git"
        assert settings.git.locale == "C.UTF-8"  # default preserved
        assert settings.hooks == {
            "5.pre-commit": "conflict-markers::run",
            "commit-msg": ["msg::check", "msg::lint"],
        }
        assert settings.config_path == tmp_path / "hookctl.toml"

    def test_discovered_from_parent(self, tmp_path: Path) -> None:
        (tmp_path / "hookctl.toml").write_text("[staged]\nchunk_size = 64\n", encoding="utf-8")
        nested = tmp_path / "sub" / "repo"
        nested.mkdir(parents=True)
        settings = HookctlSettings.from_cli(repo_root=nested)
        assert settings.staged.chunk_size == 64
        assert settings.repo_root == nested

    def test_empty_toml_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "hookctl.toml").write_text("", encoding="utf-8")
        settings = HookctlSettings.from_cli(repo_root=tmp_path)
        assert settings.staged.chunk_size == 8192

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "hooks.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[plugins]\nblocked = ["noisy"]\n', encoding="utf-8")
        settings = HookctlSettings.from_cli(config_path=str(custom), repo_root=tmp_path)
        assert settings.plugins.blocked == ["noisy"]
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "hookctl.toml").write_text("[git\n", encoding="utf-8")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            HookctlSettings.from_cli(repo_root=tmp_path)

    def test_invalid_chunk_size_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "hookctl.toml").write_text("[staged]\nchunk_size = 0\n", encoding="utf-8")
        with pytest.raises(click.ClickException, match="Invalid configuration"):
            HookctlSettings.from_cli(repo_root=tmp_path)

    def test_parent_config_ignored_above_repository(self, tmp_path: Path) -> None:
        (tmp_path / "hookctl.toml").write_text("[staged]\nchunk_size = 64\n", encoding="utf-8")
        repo = tmp_path / "repo"
        (repo / ".git").mkdir(parents=True)
        settings = HookctlSettings.from_cli(repo_root=repo)
        assert settings.staged.chunk_size == 8192
        assert settings.config_path is None


class TestCliFlags:
    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = HookctlSettings.from_cli(
            repo_root=tmp_path,
            json_output=True,
            quiet=True,
            verbose=True,
        )
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.verbose is True

    def test_cli_flags_override_toml(self, tmp_path: Path) -> None:
        (tmp_path / "hookctl.toml").write_text("verbose = true\n", encoding="utf-8")
        settings = HookctlSettings.from_cli(repo_root=tmp_path, verbose=False)
        assert settings.verbose is False


class TestRepoRootResolution:
    def test_root_from_toml_location(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """When no explicit root, use parent of discovered hookctl.toml."""
        subdir = tmp_path / "sub" / "deep"
        subdir.mkdir(parents=True)
        (tmp_path / "hookctl.toml").write_text("", encoding="utf-8")
        monkeypatch.chdir(subdir)
        settings = HookctlSettings.from_cli()
        assert settings.repo_root.resolve() == tmp_path.resolve()


class TestEnvVars:
    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOOKCTL_QUIET", "true")
        settings = HookctlSettings.from_cli(repo_root=tmp_path)
        assert settings.quiet is True

    def test_nested_env_var_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HOOKCTL_GIT__LOCALE", "en_US.UTF-8")
        settings = HookctlSettings.from_cli(repo_root=tmp_path)
        assert settings.git.locale == "en_US.UTF-8"

    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "hookctl.toml").write_text("[staged]\nchunk_size = 64\n", encoding="utf-8")
        monkeypatch.setenv("HOOKCTL_STAGED__CHUNK_SIZE", "128")
        settings = HookctlSettings.from_cli(repo_root=tmp_path)
        assert settings.staged.chunk_size == 128

    def test_invalid_env_var_rejected(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HOOKCTL_STAGED__CHUNK_SIZE", "abc")
        with pytest.raises(click.ClickException, match="chunk_size"):
            HookctlSettings.from_cli(repo_root=tmp_path)

    def test_config_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        elsewhere = tmp_path / "elsewhere.toml"
        elsewhere.write_text('[git]\nbinary = "git2"\n', encoding="utf-8")
        repo = tmp_path / "repo"
        repo.mkdir()
        monkeypatch.setenv("HOOKCTL_CONFIG", str(elsewhere))
        settings = HookctlSettings.from_cli(repo_root=repo)
        assert settings.git.binary == "git2"
