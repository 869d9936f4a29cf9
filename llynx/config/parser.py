"""Configuration file parsing utilities."""

import logging
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import ValidationError

from llynx.config.schemas import DEFAULT_CONFIG_FILE, Config, ConfigOverrides

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Error loading or parsing configuration."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


def load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Parsed TOML as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e


def save_toml(path: Path, data: dict[str, Any]) -> None:
    """Save data to a TOML file.

    Args:
        path: Path to write to
        data: Data to serialize
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        tomli_w.dump(data, f)


def load_config_file(path: Path) -> ConfigOverrides:
    """Load configuration overrides from a TOML file.

    Raises:
        ConfigError: If the file is missing, invalid TOML, or has unknown keys
    """
    data = load_toml(path)
    try:
        return ConfigOverrides.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}", path) from e


def find_config_file(path: Path | None = None) -> ConfigOverrides | None:
    """Load the explicit config file, or the default one if it exists.

    Args:
        path: Config file given on the command line; it must exist

    Returns:
        Overrides from the file, or None when no file applies
    """
    if path is not None:
        return load_config_file(path)

    default_path = Path(DEFAULT_CONFIG_FILE)
    if not default_path.exists():
        logger.debug("default config file not found, using defaults...")
        return None
    return load_config_file(default_path)


def resolve_config(
    cli_overrides: ConfigOverrides,
    config_path: Path | None = None,
) -> Config:
    """Resolve configuration: flags override the file, which overrides defaults.

    Args:
        cli_overrides: Values given on the command line
        config_path: Explicit config file, if any

    Returns:
        Fully resolved configuration
    """
    return Config().extend(find_config_file(config_path)).extend(cli_overrides)


def save_config(path: Path, config: Config) -> None:
    """Write a configuration as a config file.

    Args:
        path: Path of the config file
        config: Values to write
    """
    save_toml(path, config.model_dump())
