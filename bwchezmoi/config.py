"""Settings for bwchezmoi."""

from __future__ import annotations

import logging
import os
import platform
import tomllib
from pathlib import Path
from typing import Any, Final

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from bwchezmoi.exceptions import ConfigError
from bwchezmoi.formats import FORMAT_REGISTRY
from bwchezmoi.naming import CollisionPolicy

logger = logging.getLogger(__name__)

APP_NAME: Final[str] = "bwchezmoi"
SETTINGS_FILE: Final[str] = "config.toml"
ENV_CONFIG_DIR: Final[str] = "BWCHEZMOI_CONFIG_DIR"


class Settings(BaseModel):
    """Runtime settings, read from ``config.toml``."""

    model_config = ConfigDict(extra="forbid")

    output_dir: Path = Path("chezmoi-templates-generated")
    bw_command: str = "bw"
    usage_format: str = "toml"
    collision_policy: CollisionPolicy = CollisionPolicy.SUFFIX
    preview_length: int = Field(default=20, ge=0)
    timeout: float = Field(default=60.0, gt=0)

    @field_validator("usage_format")
    @classmethod
    def known_format(cls, v: str) -> str:
        if v not in FORMAT_REGISTRY:
            raise ValueError(
                f"unsupported format '{v}', "
                f"expected one of: {', '.join(FORMAT_REGISTRY)}"
            )
        return v

    def merged(self, **overrides: Any) -> Settings:
        """Return a copy with the non-None overrides applied."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return Settings.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid option: {e}") from e


def _get_default_config_dir() -> Path:
    """Get the default config directory for the current platform.

    Returns:
        Path to default config directory
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / APP_NAME
        return Path.home() / APP_NAME

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_config_dir(config_dir: str | Path | None = None) -> Path:
    """Resolve the config directory.

    Args:
        config_dir: User-specified directory, or None for the default

    Returns:
        Path to config directory
    """
    if config_dir:
        return Path(config_dir).expanduser()

    env_dir = os.environ.get(ENV_CONFIG_DIR)
    if env_dir:
        return Path(env_dir).expanduser()

    return _get_default_config_dir()


def load_settings(config_dir: str | Path | None = None) -> Settings:
    """Load settings from the config directory.

    A missing settings file yields the defaults.

    Args:
        config_dir: Config directory, or None for the default

    Returns:
        Loaded settings

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    settings_file = get_config_dir(config_dir) / SETTINGS_FILE
    if not settings_file.exists():
        logger.debug(f"No settings file at {settings_file}, using defaults")
        return Settings()

    try:
        with open(settings_file, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to read {settings_file}: {e}") from e

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {settings_file}: {e}") from e

    logger.debug(f"Loaded settings from {settings_file}")
    return settings


def write_default_settings(config_dir: str | Path | None = None) -> Path | None:
    """Write a settings file with default values if none exists.

    Returns:
        Path of the written file, or None if one already existed
    """
    settings_file = get_config_dir(config_dir) / SETTINGS_FILE
    if settings_file.exists():
        return None

    settings_file.parent.mkdir(parents=True, exist_ok=True)
    data = Settings().model_dump(mode="json")
    with open(settings_file, "wb") as f:
        tomli_w.dump(data, f)

    logger.info(f"Wrote default settings to {settings_file}")
    return settings_file
