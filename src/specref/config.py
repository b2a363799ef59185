"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments
  2. Environment variables   (SPECREF__VALIDATOR__SHOW_VALID_INDICATORS=true)
  3. specref.yaml            (searched in cwd, then platform config dir)
  4. Hardcoded defaults

The config file is optional; all fields have sensible defaults. Settings
are passed explicitly into each component; nothing reads a global config.
CLI flags such as --show-valid are applied afterwards, by copying the
relevant group with the flag set.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


def _find_config_file() -> str | None:
    """Return the path of the first specref.yaml found, or None."""
    candidates = [
        Path("specref.yaml"),
        Path(platformdirs.user_config_dir("specref")) / "specref.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ValidatorSettings(BaseModel):
    # Valid indicators are noisy on large specs, so they are opt-in.
    show_valid_indicators: bool = False
    cache_timeout_ms: int = Field(default=5 * 60 * 1000, ge=0)
    similarity_threshold: float = Field(default=0.95, ge=0.0, le=1.0)
    debug: bool = False


class TriggerSettings(BaseModel):
    settle_delay_ms: int = Field(default=100, ge=0)
    fallback_timeout_ms: int = Field(default=3000, ge=0)


class FetcherSettings(BaseModel):
    request_timeout_seconds: float = 30.0
    user_agent: str = "specref/1.0"
    max_connections: int = 10


class BuildSettings(BaseModel):
    output_dir: str = "output"
    xtrefs_filename: str = "xtrefs-data.json"

    @property
    def xtrefs_path(self) -> Path:
        return Path(self.output_dir) / self.xtrefs_filename


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: SPECREF__VALIDATOR__DEBUG=true
        env_prefix="SPECREF__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    validator: ValidatorSettings = ValidatorSettings()
    trigger: TriggerSettings = TriggerSettings()
    fetcher: FetcherSettings = FetcherSettings()
    build: BuildSettings = BuildSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
