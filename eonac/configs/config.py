"""Centralized configuration management for EONAC."""

import configparser
import json
import os
from typing import Any, Optional

import yaml

from eonac.domain.config import SolverConfig

from .errors import ConfigError, ConfigFileNotFoundError, ConfigParseError

SOLVER_SECTION = "solver_settings"


class ConfigManager:
    """Configuration file manager producing :class:`SolverConfig` objects."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to configuration file, loaded when it exists
        """
        self.config_path = config_path
        self._config: Optional[SolverConfig] = None
        self._raw_config: dict[str, Any] = {}

        if config_path and os.path.exists(config_path):
            self.load_config(config_path)

    def load_config(self, path: str) -> SolverConfig:
        """Load and validate configuration from file.

        Args:
            path: Path to configuration file

        Returns:
            Validated configuration object

        Raises:
            ConfigFileNotFoundError: If configuration file doesn't exist
            ConfigParseError: If the file cannot be parsed
            ConfigTypeConversionError: If a value has the wrong type
            InvalidConfigValueError: If a value is out of range
        """
        if not os.path.exists(path):
            raise ConfigFileNotFoundError(f"Configuration file not found: {path}")

        try:
            if path.endswith(".ini"):
                raw_config = self._load_ini(path)
            elif path.endswith(".json"):
                raw_config = self._load_json(path)
            elif path.endswith((".yaml", ".yml")):
                raw_config = self._load_yaml(path)
            else:
                raise ConfigParseError(f"Unsupported configuration file format: {path}")
        except (configparser.Error, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigParseError(f"Failed to parse {path}: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigParseError(f"Configuration file {path} must contain a mapping")

        self._raw_config = raw_config
        self._config = self._create_config_object(raw_config)
        return self._config

    def _load_ini(self, path: str) -> dict[str, Any]:
        """Load INI configuration file."""
        config = configparser.ConfigParser()
        config.read(path)

        result = {}
        for section_name in config.sections():
            section = {}
            for key, value in config[section_name].items():
                if value.lower() == "none":
                    section[key] = None
                else:
                    section[key] = value
            result[section_name] = section

        return result

    def _load_json(self, path: str) -> dict[str, Any]:
        """Load JSON configuration file."""
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def _load_yaml(self, path: str) -> dict[str, Any]:
        """Load YAML configuration file."""
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _create_config_object(self, raw_config: dict[str, Any]) -> SolverConfig:
        """Create structured configuration object from raw config."""
        section = raw_config.get(SOLVER_SECTION, {})
        if not isinstance(section, dict):
            raise ConfigParseError(f"Section '{SOLVER_SECTION}' must be a mapping")
        return SolverConfig.from_dict(section)

    def get_config(self) -> Optional[SolverConfig]:
        """Get the loaded configuration object."""
        return self._config

    def get_solver_config(self, **overrides: Any) -> SolverConfig:
        """Loaded configuration (or defaults) with non-None ``overrides`` applied."""
        base = self._config or SolverConfig()
        return base.with_overrides(**overrides)

    def save_config(self, path: str, format_type: str = "ini") -> None:
        """Save current configuration to file.

        Args:
            path: Output file path
            format_type: Output format ('ini', 'json', 'yaml')
        """
        if self._config is None:
            raise ConfigError("No configuration loaded to save")

        self._raw_config[SOLVER_SECTION] = self._config.to_dict()
        if format_type == "ini":
            self._save_ini(path)
        elif format_type == "json":
            self._save_json(path)
        elif format_type == "yaml":
            self._save_yaml(path)
        else:
            raise ConfigError(f"Unsupported format: {format_type}")

    def _save_ini(self, path: str) -> None:
        """Save configuration as INI file."""
        config = configparser.ConfigParser()

        for section_name, section_data in self._raw_config.items():
            config[section_name] = {}
            for key, value in section_data.items():
                config[section_name][key] = str(value)

        with open(path, "w", encoding="utf-8") as f:
            config.write(f)

    def _save_json(self, path: str) -> None:
        """Save configuration as JSON file."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self._raw_config, f, indent=2)

    def _save_yaml(self, path: str) -> None:
        """Save configuration as YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self._raw_config, f, default_flow_style=False)

    def update_config(self, key: str, value: Any) -> None:
        """Update one solver option and re-validate.

        Args:
            key: Option name in ``solver_settings``
            value: New value
        """
        section = self._raw_config.setdefault(SOLVER_SECTION, {})
        section[key] = value
        self._config = self._create_config_object(self._raw_config)
