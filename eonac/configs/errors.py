"""Configuration-related exception classes for EONAC."""

from eonac.domain.errors import (
    ConfigTypeConversionError,
    ConfigurationError,
    InvalidConfigValueError,
)


class ConfigError(ConfigurationError):
    """Base exception for configuration file errors.

    All file-related exceptions inherit from this class, which is itself
    a :class:`ConfigurationError`, so callers can catch either.
    """


class ConfigFileNotFoundError(ConfigError):
    """Raised when config file cannot be found."""


class ConfigParseError(ConfigError):
    """Raised when config file cannot be parsed.

    This exception is raised when a configuration file exists but
    contains invalid syntax or cannot be parsed in the expected format
    (INI, JSON, YAML).
    """


__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigTypeConversionError",
    "InvalidConfigValueError",
]
