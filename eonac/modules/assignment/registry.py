"""
Admission control strategy registry for EONAC.

This module provides a centralized registry for all strategy
implementations that follow the AbstractAssignmentStrategy interface.
"""

from typing import Any

from eonac.domain.catalog import RequestCatalog
from eonac.domain.config import SolverConfig
from eonac.interfaces.assignment import AbstractAssignmentStrategy

from .branch_and_bound import BranchAndBoundAssigner
from .first_fit_decreasing import FirstFitDecreasingAssigner

DEFAULT_ALIASES: dict[str, str] = {
    "exact": "branch_and_bound",
    "greedy": "first_fit_decreasing",
}


class AssignmentRegistry:
    """Registry for managing admission control strategy implementations."""

    def __init__(self):
        """Initialize the strategy registry."""
        self._strategies: dict[str, type[AbstractAssignmentStrategy]] = {}
        self._aliases: dict[str, str] = {}
        self._register_default_strategies()

    def _register_default_strategies(self):
        """Register the built-in strategies and their aliases."""
        self.register("branch_and_bound", BranchAndBoundAssigner)
        self.register("first_fit_decreasing", FirstFitDecreasingAssigner)
        for alias, name in DEFAULT_ALIASES.items():
            self.register_alias(alias, name)

    def register(self, name: str, strategy_class: type[AbstractAssignmentStrategy]):
        """Register a strategy.

        Args:
            name: Unique name for the strategy
            strategy_class: Class that implements AbstractAssignmentStrategy

        Raises:
            TypeError: If strategy_class doesn't implement AbstractAssignmentStrategy
            ValueError: If name is already registered
        """
        if not isinstance(strategy_class, type) or not issubclass(
            strategy_class, AbstractAssignmentStrategy
        ):
            raise TypeError(
                f"{getattr(strategy_class, '__name__', strategy_class)} must "
                "implement AbstractAssignmentStrategy"
            )

        if name in self._strategies or name in self._aliases:
            raise ValueError(f"Assignment strategy '{name}' is already registered")

        self._strategies[name] = strategy_class

    def register_alias(self, alias: str, name: str):
        """Register an alternative name for a registered strategy."""
        if name not in self._strategies:
            raise KeyError(f"Cannot alias unknown strategy '{name}'")
        if alias in self._strategies or alias in self._aliases:
            raise ValueError(f"Assignment strategy '{alias}' is already registered")
        self._aliases[alias] = name

    def resolve(self, name: str) -> str:
        """Canonical name for ``name`` or one of its aliases."""
        return self._aliases.get(name, name)

    def get(self, name: str) -> type[AbstractAssignmentStrategy]:
        """Get a strategy class by name or alias.

        Args:
            name: Name or alias of the strategy

        Returns:
            Strategy class that implements AbstractAssignmentStrategy

        Raises:
            KeyError: If strategy is not found
        """
        canonical = self.resolve(name)
        if canonical not in self._strategies:
            raise KeyError(
                f"Assignment strategy '{name}' not found. "
                f"Available strategies: {self.list_strategies()}"
            )

        return self._strategies[canonical]

    def create(
        self, name: str, catalog: RequestCatalog, config: SolverConfig
    ) -> AbstractAssignmentStrategy:
        """Create a configured strategy instance."""
        strategy_class = self.get(name)
        return strategy_class(catalog, config)

    def list_strategies(self) -> list[str]:
        """List all registered canonical names."""
        return list(self._strategies.keys())

    def get_strategy_info(self, name: str) -> dict[str, Any]:
        """Get information about a specific strategy."""
        strategy_class = self.get(name)
        return {
            "name": self.resolve(name),
            "class": strategy_class.__name__,
            "module": strategy_class.__module__,
            "aliases": sorted(
                alias
                for alias, target in self._aliases.items()
                if target == self.resolve(name)
            ),
            "description": (strategy_class.__doc__ or "").strip().splitlines()[0],
        }


# Global registry instance
_registry = AssignmentRegistry()


def get_strategy(name: str) -> type[AbstractAssignmentStrategy]:
    """Get a strategy class by name from the global registry."""
    return _registry.get(name)


def create_strategy(
    name: str, catalog: RequestCatalog, config: SolverConfig
) -> AbstractAssignmentStrategy:
    """Create a strategy instance from the global registry."""
    return _registry.create(name, catalog, config)


def list_strategies() -> list[str]:
    """List all available strategy names."""
    return _registry.list_strategies()


def get_strategy_info(name: str) -> dict[str, Any]:
    """Get information about a strategy."""
    return _registry.get_strategy_info(name)


def resolve_strategy_name(name: str) -> str:
    """Canonical registry name for ``name``."""
    return _registry.resolve(name)


def register_strategy(name: str, strategy_class: type[AbstractAssignmentStrategy]):
    """Register an additional strategy in the global registry."""
    _registry.register(name, strategy_class)


ASSIGNMENT_STRATEGIES = {
    "branch_and_bound": BranchAndBoundAssigner,
    "first_fit_decreasing": FirstFitDecreasingAssigner,
}
