"""
SolverConfig - Immutable solver configuration.

This module defines the SolverConfig frozen dataclass that carries every
tunable of a solve: strategy choice, request priority, search budget,
parallelism and logging.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any

from eonac.domain.errors import ConfigTypeConversionError, InvalidConfigValueError

# =============================================================================
# Defaults
# =============================================================================
DEFAULT_STRATEGY = "branch_and_bound"
DEFAULT_PRIORITY = "demand_desc"

PRIORITY_CHOICES: tuple[str, ...] = ("demand_desc", "demand_asc", "catalog")
UNKNOWN_LINK_POLICY_CHOICES: tuple[str, ...] = ("reject", "error")
LOG_LEVEL_CHOICES: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_BOOL_STRINGS = {"true": True, "false": False, "1": True, "0": False, "yes": True, "no": False}


@dataclass(frozen=True)
class SolverConfig:
    """
    Immutable solver configuration.

    Attributes:
        strategy: Registry name of the assignment strategy
            ("branch_and_bound"/"exact" or "first_fit_decreasing"/"greedy")
        priority: Request ordering ("demand_desc", "demand_asc", "catalog")
        time_limit_s: Wall-clock budget of the exact search (None = unlimited)
        max_steps: Node budget of the exact search (None = unlimited)
        seed_with_greedy: Seed the exact search with the greedy incumbent
        workers: Threads used to pre-check candidates in the greedy strategy
        unknown_link_policy: "reject" or "error" for paths over missing links;
            None keeps the policy declared by the instance (default "reject")
        log_level: Logging level for CLI runs

    Example:
        >>> config = SolverConfig.from_dict({"strategy": "greedy", "workers": "4"})
        >>> config.workers
        4
    """

    strategy: str = DEFAULT_STRATEGY
    priority: str = DEFAULT_PRIORITY
    time_limit_s: float | None = None
    max_steps: int | None = None
    seed_with_greedy: bool = True
    workers: int = 1
    unknown_link_policy: str | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.priority not in PRIORITY_CHOICES:
            raise InvalidConfigValueError(
                f"priority must be one of {PRIORITY_CHOICES}, got '{self.priority}'"
            )
        if (
            self.unknown_link_policy is not None
            and self.unknown_link_policy not in UNKNOWN_LINK_POLICY_CHOICES
        ):
            raise InvalidConfigValueError(
                f"unknown_link_policy must be one of {UNKNOWN_LINK_POLICY_CHOICES}, "
                f"got '{self.unknown_link_policy}'"
            )
        if self.log_level.upper() not in LOG_LEVEL_CHOICES:
            raise InvalidConfigValueError(
                f"log_level must be one of {LOG_LEVEL_CHOICES}, got '{self.log_level}'"
            )
        if self.time_limit_s is not None and self.time_limit_s <= 0:
            raise InvalidConfigValueError(
                f"time_limit_s must be positive, got {self.time_limit_s}"
            )
        if self.max_steps is not None and self.max_steps <= 0:
            raise InvalidConfigValueError(
                f"max_steps must be positive, got {self.max_steps}"
            )
        if self.workers < 1:
            raise InvalidConfigValueError(f"workers must be >= 1, got {self.workers}")

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> SolverConfig:
        """
        Create a config from loosely typed values (INI strings, CLI, YAML).

        Unknown keys are ignored; None values fall back to defaults.

        :param values: Raw option mapping
        :return: Validated configuration
        :raises ConfigTypeConversionError: If a value cannot be converted
        :raises InvalidConfigValueError: If a converted value is out of range
        """
        converted: dict[str, Any] = {}
        for config_field in fields(cls):
            if config_field.name not in values or values[config_field.name] is None:
                continue
            raw = values[config_field.name]
            converted[config_field.name] = _convert(config_field.name, raw)
        return cls(**converted)

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping of every option."""
        return asdict(self)

    def with_overrides(self, **overrides: Any) -> SolverConfig:
        """Return a copy with the non-None ``overrides`` applied."""
        merged = self.to_dict()
        merged.update({key: value for key, value in overrides.items() if value is not None})
        return SolverConfig.from_dict(merged)


def _convert(name: str, raw: Any) -> Any:
    try:
        if name == "unknown_link_policy":
            if isinstance(raw, str) and raw.strip().lower() in ("none", ""):
                return None
            return str(raw).strip().lower()
        if name in ("strategy", "priority"):
            return str(raw).strip().lower()
        if name == "log_level":
            return str(raw).strip().upper()
        if name == "time_limit_s":
            if isinstance(raw, str) and raw.strip().lower() in ("none", ""):
                return None
            return float(raw)
        if name == "max_steps":
            if isinstance(raw, str) and raw.strip().lower() in ("none", ""):
                return None
            return int(raw)
        if name == "workers":
            return int(raw)
        if name == "seed_with_greedy":
            if isinstance(raw, bool):
                return raw
            return _BOOL_STRINGS[str(raw).strip().lower()]
    except (TypeError, ValueError, KeyError) as e:
        raise ConfigTypeConversionError(
            f"Cannot convert option '{name}' value {raw!r}: {e}"
        ) from e
    return raw
