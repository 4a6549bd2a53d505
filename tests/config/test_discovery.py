"""Tests for config file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from hookctl.config.discovery import CONFIG_ENV_VAR, find_config


class TestFindConfig:
    def test_in_start_directory(self, tmp_path: Path) -> None:
        (tmp_path / "hookctl.toml").write_text("", encoding="utf-8")
        assert find_config(tmp_path) == (tmp_path / "hookctl.toml").resolve()

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "hookctl.toml").write_text("", encoding="utf-8")
        deep = tmp_path / "a" / "b"
        deep.mkdir(parents=True)
        assert find_config(deep) == (tmp_path / "hookctl.toml").resolve()

    def test_stops_at_repository_root(self, tmp_path: Path) -> None:
        (tmp_path / "hookctl.toml").write_text("", encoding="utf-8")
        repo = tmp_path / "repo"
        (repo / ".git").mkdir(parents=True)
        deep = repo / "src"
        deep.mkdir()
        assert find_config(deep) is None

    def test_repository_root_config_found_from_subdirectory(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        (tmp_path / "hookctl.toml").write_text("", encoding="utf-8")
        deep = tmp_path / "a"
        deep.mkdir()
        assert find_config(deep) == (tmp_path / "hookctl.toml").resolve()

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        target = tmp_path / "custom.toml"
        target.write_text("", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(target))
        assert find_config(tmp_path / "ignored") == target

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "hookctl.toml").write_text("", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None

