"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, gitdown.toml only contains
overrides. An empty (or missing) gitdown.toml is a valid configuration.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, field_validator

# --- gitdown.toml sections ---


class EngineConfig(BaseModel):
    """[engine] section."""

    model_config = {"frozen": True}

    # None disables the cap; the parser then loops until convergence.
    max_passes: int | None = 1000

    @field_validator("max_passes")
    @classmethod
    def _positive(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            msg = "max_passes must be a positive integer"
            raise ValueError(msg)
        return value


class GitinfoConfig(BaseModel):
    """[gitinfo] section."""

    model_config = {"frozen": True}

    git_path: Path | None = None
    default_branch_name: str | None = None


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".gitdown/plugins"

