"""Pydantic configuration models with code-baked defaults.

One model per hookctl.toml section, composed by HookctlSettings.
Sparse TOML contract: defaults baked here, hookctl.toml only contains
overrides. A project that only opts into actions needs nothing but a
[hooks] table.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from hookctl.domain.hooks import supported_hooks

# --- hookctl.toml sections ---


class GitConfig(BaseModel):
    """[git] section."""

    model_config = {"frozen": True}

    binary: str = "git"
    locale: str = "C.UTF-8"


class StagedConfig(BaseModel):
    """[staged] section."""

    model_config = {"frozen": True}

    chunk_size: int = Field(default=8192, gt=0)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    local_dir: str = ".hookctl/actions"
    blocked: list[str] = Field(default_factory=list)


class InstallConfig(BaseModel):
    """[install] section."""

    model_config = {"frozen": True}

    hooks: list[str] = Field(default_factory=supported_hooks)
    force: bool = False

