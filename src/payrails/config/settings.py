"""PayrailsSettings — CLI flags, environment, and TOML merged into one object.

Priority (highest first): CLI flags, ``PAYRAILS_*`` environment variables
(``__`` separates nested sections, e.g. ``PAYRAILS_ACH__COMPANY_NAME``),
the discovered config file, then the defaults baked into the section
models.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from payrails.config.discovery import find_config, read_config_table
from payrails.config.models import (
    AchConfig,
    CutoffsConfig,
    PayrailsConfig,
    PluginsConfig,
    RailsConfig,
    SelectorConfig,
)

# Config file chosen by ``from_cli`` for the settings instance being built.
_config_file: ContextVar[Path | None] = ContextVar("_config_file", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by one TOML file (or nothing)."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if path is not None:
            try:
                self._data = read_config_table(path)
            except tomllib.TOMLDecodeError as exc:
                raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


class PayrailsSettings(BaseSettings):
    """Frozen settings for one CLI invocation, held by AppContext.

    Attributes:
        config_path: The config file that was loaded, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PAYRAILS_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # Output and runtime flags
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    sync: bool = True

    # TOML sections
    ach: AchConfig = Field(default_factory=AchConfig)
    rails: RailsConfig = Field(default_factory=RailsConfig)
    cutoffs: CutoffsConfig = Field(default_factory=CutoffsConfig)
    selector: SelectorConfig = Field(default_factory=SelectorConfig)
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
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _config_file.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> PayrailsSettings:
        """Settings for a CLI run; *cli_flags* override everything else.

        An explicit *config_path* must exist.  Without one the config file
        is discovered by walking up from *start*.
        """
        if config_path:
            path: Path | None = Path(config_path)
            if not path.is_file():
                raise click.ClickException(f"Config file not found: {config_path}")
        else:
            path = find_config(start)

        token = _config_file.set(path)
        try:
            return cls(config_path=path, **cli_flags)
        finally:
            _config_file.reset(token)

    def to_config(self) -> PayrailsConfig:
        """The TOML-section view, without CLI flags."""
        return PayrailsConfig(
            ach=self.ach,
            rails=self.rails,
            cutoffs=self.cutoffs,
            selector=self.selector,
            plugins=self.plugins,
        )
