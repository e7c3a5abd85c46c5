"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``GITDOWN_*`` prefix
  3. TOML file    — ``gitdown.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

This is the object helpers reach through ``context.gitdown.get_config()``.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from gitdown.config.discovery import find_config
from gitdown.config.models import EngineConfig, GitinfoConfig, PluginsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``gitdown.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class GitdownSettings(BaseSettings):
    """Unified, frozen settings for a gitdown run.

    Attributes:
        base_directory: Directory that relative paths in directives (for
            example ``include``'s ``file``) resolve against.
        config_path: The ``gitdown.toml`` in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "GITDOWN_",
        "env_nested_delimiter": "__",
    }

    base_directory: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    engine: EngineConfig = Field(default_factory=EngineConfig)
    gitinfo: GitinfoConfig = Field(default_factory=GitinfoConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        base_directory: Path | None = None,
        **cli_flags: Any,
    ) -> GitdownSettings:
        """Construct settings from a CLI invocation.

        Discovers ``gitdown.toml`` via walk-up (or explicit *config_path*),
        defaults *base_directory* to the config file's directory, and merges
        CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(base_directory)

        resolved_base = base_directory
        if resolved_base is None:
            resolved_base = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                base_directory=resolved_base,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    @property
    def git_path(self) -> Path:
        """Repository directory queried by the ``gitinfo`` helper."""
        path = self.gitinfo.git_path
        if path is None:
            return self.base_directory
        if not path.is_absolute():
            return self.base_directory / path
        return path

    @property
    def plugin_dir(self) -> Path:
        return self.base_directory / self.plugins.local_dir
