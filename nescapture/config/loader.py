"""Configuration loader from YAML file."""

import dataclasses
import logging
import yaml
from pathlib import Path
from typing import Optional

from .settings import (
    Settings,
    DisplayConfig,
    ToolsConfig,
    EmulatorConfig,
    WindowConfig,
    TimingConfig,
    VideoConfig,
    ViewportConfig,
    LoggingConfig,
)
from ..utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "nescapture.yaml"

_SECTIONS = {
    "display": DisplayConfig,
    "tools": ToolsConfig,
    "emulator": EmulatorConfig,
    "window": WindowConfig,
    "timing": TimingConfig,
    "video": VideoConfig,
    "viewport": ViewportConfig,
    "logging": LoggingConfig,
}


def _build_section(name: str, cls, data):
    """
    Build one config dataclass from a YAML mapping.

    Args:
        name: Section name, used in error messages.
        cls: Dataclass type for the section.
        data: Mapping loaded from YAML.

    Returns:
        Instance of cls with defaults for missing keys.

    Raises:
        ConfigurationError: If the section is not a mapping.
    """
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigurationError(f"Section '{name}' must be a mapping, got {type(data).__name__}")

    known = {f.name for f in dataclasses.fields(cls)}
    unknown = set(data) - known
    if unknown:
        logger.warning(f"Ignoring unknown keys in '{name}': {', '.join(sorted(unknown))}")

    return cls(**{key: value for key, value in data.items() if key in known})


def load_config(config_path: Optional[Path] = None) -> Settings:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, looks for nescapture.yaml in
            the working directory and falls back to defaults when it is absent.

    Returns:
        Settings object with loaded configuration.

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist.
        ConfigurationError: If the config file is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.exists():
            return Settings()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if config_data is None:
        config_data = {}
    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Top level of {config_path} must be a mapping")

    settings = Settings()
    for name, cls in _SECTIONS.items():
        if name in config_data:
            setattr(settings, name, _build_section(name, cls, config_data[name]))

    return settings
