"""
Configuration for sealchain.

Settings come from an optional YAML file in the user's configuration
directory, then environment variables, then command-line options.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "sealchain"
KEYCHAIN_SUBDIR = "keypairs"
CONFIG_FILENAME = "config.yaml"

KEYCHAIN_DIR_ENV = "SEALCHAIN_KEYCHAIN_DIR"
LOG_LEVEL_ENV = "SEALCHAIN_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_config_dir() -> Path:
    """Per-user configuration root for sealchain."""
    return Path(user_config_dir(APP_NAME))


def default_keychain_dir() -> Path:
    """Default keychain location inside the configuration root."""
    return default_config_dir() / KEYCHAIN_SUBDIR


def default_config_path() -> Path:
    return default_config_dir() / CONFIG_FILENAME


class Settings(BaseModel):
    """Resolved sealchain settings."""

    keychain_dir: Optional[str] = Field(
        default=None, description="Keychain directory (default: <config dir>/keypairs)"
    )
    log_level: str = Field(default="WARNING", description="Logging level name")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the logging level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {LOG_LEVELS}")
        return level

    def keychain_path(self) -> Path:
        """Configured keychain directory, or the default one."""
        if self.keychain_dir:
            return Path(self.keychain_dir).expanduser()
        return default_keychain_dir()


def _section(data: Dict[str, Any], name: str, config_path: Path) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config file {config_path}: section '{name}' must be a mapping")
    return section


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    """Flatten the YAML config layout into Settings fields."""
    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Unable to read config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    values: Dict[str, Any] = {}
    keychain = _section(data, "keychain", config_path)
    if "dir" in keychain:
        values["keychain_dir"] = keychain["dir"]
    logging_section = _section(data, "logging", config_path)
    if "level" in logging_section:
        values["log_level"] = logging_section["level"]
    return values


def load_settings(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Load settings.

    Args:
        config_path: YAML config file (default: <config dir>/config.yaml).
            An explicitly given file must exist.
        environ: Environment mapping (default: os.environ)

    Returns:
        Resolved settings

    Raises:
        ConfigError: If the config file is unreadable or holds invalid values
    """
    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        values.update(_read_config_file(path))
    elif default_config_path().is_file():
        values.update(_read_config_file(default_config_path()))

    if env.get(KEYCHAIN_DIR_ENV):
        values["keychain_dir"] = env[KEYCHAIN_DIR_ENV]
    if env.get(LOG_LEVEL_ENV):
        values["log_level"] = env[LOG_LEVEL_ENV]

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
