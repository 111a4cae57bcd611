"""YAML configuration file loader.

A SizeLens configuration file is a mapping of section name (``parser``,
``logging``) to the keyword arguments of the matching settings model.
"""

from pathlib import Path
from typing import Any

import yaml

from sizelens.core.exceptions.errors import ConfigurationError


class ConfigLoader:
    """Load a SizeLens configuration file."""

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize the config loader.

        Args:
            config_path: Path to configuration file.
        """
        self.config_path = config_path
        self._config: dict[str, Any] = {}

    def load(self, path: Path | None = None) -> dict[str, Any]:
        """Read and parse the configuration file.

        Args:
            path: Path to YAML file. Uses config_path if not provided.

        Returns:
            Loaded configuration; empty when there is no path or the file is empty.

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML, or
                does not hold a mapping.
        """
        load_path = path or self.config_path
        if not load_path:
            return {}

        try:
            text = Path(load_path).read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Configuration file not found: {load_path}",
                details={"path": str(load_path)},
            ) from e

        try:
            loaded = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {load_path}",
                details={"path": str(load_path), "error": str(e)},
            ) from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping, got {type(loaded).__name__}",
                details={"path": str(load_path)},
            )
        self._config = loaded
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key, e.g. ``parser.max_variable_depth``."""
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_section(self, section: str) -> dict[str, Any]:
        """Get the settings of one section.

        An absent or empty section (``logging:`` with nothing under it) is
        an empty mapping.

        Raises:
            ConfigurationError: If the section holds a scalar or a list.
        """
        result = self._config.get(section)
        if result is None:
            return {}
        if not isinstance(result, dict):
            raise ConfigurationError(
                f"Configuration section must be a mapping, got {type(result).__name__}",
                config_key=section,
            )
        return result

    @property
    def config(self) -> dict[str, Any]:
        """Return the loaded configuration."""
        return self._config
