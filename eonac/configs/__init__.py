"""
Configuration management system for EONAC.

Main components:
- ConfigManager: Loads INI / JSON / YAML solver settings into SolverConfig
- Error classes: Specific configuration exceptions
"""

# Local application imports
from .config import SOLVER_SECTION, ConfigManager
from .errors import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigTypeConversionError,
    InvalidConfigValueError,
)

__all__ = [
    # Core classes
    "ConfigManager",
    "SOLVER_SECTION",
    # Error classes
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigTypeConversionError",
    "InvalidConfigValueError",
]
