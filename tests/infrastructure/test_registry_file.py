"""Tests for the generated registry file."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from hookctl.domain.registry import Registry, RegistryBuilder
from hookctl.errors import RegistryUnreadable
from hookctl.infrastructure.registry_file import load_registry, render_registry, write_registry


@pytest.fixture
def registry() -> Registry:
    builder = RegistryBuilder()
    builder.add_entry("pre-commit", "lint::run", 20)
    builder.add_entry("pre-commit", "format::run", 5)
    builder.add_entry("commit-msg", "msg::check")
    return builder.build()


class TestRenderRegistry:
    def test_header(self, registry: Registry) -> None:
        stamp = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        text = render_registry(registry, timestamp=stamp)
        lines = text.splitlines()
        assert lines[0] == "# hookctl registry file."
        assert lines[1] == "# Do not edit, this file is generated automatically."
        assert lines[2] == "# Timestamp: 2024-01-02T03:04:05+00:00"

    def test_lists_every_supported_hook(self, registry: Registry) -> None:
        text = render_registry(registry)
        assert "'pre-push': {}," in text
        assert "'lint::run'," in text


class TestLoadRegistry:
    def test_round_trip(self, tmp_path: Path, registry: Registry) -> None:
        path = write_registry(tmp_path / "control" / "registry.py", registry)
        loaded = load_registry(path)
        assert loaded == registry
        assert [str(r) for r in loaded.iter_entries("pre-commit")] == ["format::run", "lint::run"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RegistryUnreadable, match="does not exist"):
            load_registry(tmp_path / "registry.py")

    def test_syntax_error(self, tmp_path: Path) -> None:
        path = tmp_path / "registry.py"
        path.write_text("HOOKS = {\n", encoding="utf-8")
        with pytest.raises(RegistryUnreadable, match="could not be loaded"):
            load_registry(path)

    def test_missing_hooks_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "registry.py"
        path.write_text("OTHER = 1\n", encoding="utf-8")
        with pytest.raises(RegistryUnreadable, match="HOOKS mapping"):
            load_registry(path)

    def test_malformed_reference(self, tmp_path: Path) -> None:
        path = tmp_path / "registry.py"
        path.write_text("HOOKS = {'pre-commit': {10: ['no-separator']}}\n", encoding="utf-8")
        with pytest.raises(RegistryUnreadable, match="malformed"):
            load_registry(path)

    def test_rewrite_is_picked_up(self, tmp_path: Path, registry: Registry) -> None:
        path = tmp_path / "registry.py"
        write_registry(path, registry)
        assert len(load_registry(path)) == 3
        write_registry(path, Registry())
        assert len(load_registry(path)) == 0
