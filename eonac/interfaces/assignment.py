"""
Abstract base class for admission control strategies in EONAC.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from eonac.core.ledger import SpectrumLedger
from eonac.domain.assignment import Assignment, SearchStats
from eonac.domain.catalog import RequestCatalog
from eonac.domain.config import SolverConfig


class StrategyOutcome:
    """
    What a strategy hands back to the engine.

    :param assignments: Decisions keyed by request id
    :param proven_optimal: True when the acceptance count is known maximal
    :param budget_exceeded: True when the search stopped on its budget
    :param stats: Search counters
    """

    def __init__(
        self,
        assignments: dict[str, Assignment],
        proven_optimal: bool,
        budget_exceeded: bool,
        stats: SearchStats,
    ) -> None:
        self.assignments = assignments
        self.proven_optimal = proven_optimal
        self.budget_exceeded = budget_exceeded
        self.stats = stats


class AbstractAssignmentStrategy(ABC):
    """Base class for all admission control strategies in EONAC.

    A strategy decides, for every request of the catalog, either rejection or
    a (path, start, zone) choice, and commits accepted choices to the ledger
    it is given. When ``solve`` returns, the ledger must hold exactly the
    accepted assignments.
    """

    def __init__(self, catalog: RequestCatalog, config: SolverConfig):
        """Initialize the strategy.

        Args:
            catalog: Validated problem data
            config: Solver settings
        """
        self.catalog = catalog
        self.config = config

    @property
    @abstractmethod
    def algorithm_name(self) -> str:
        """Return the registry name of the strategy."""

    @property
    @abstractmethod
    def is_exact(self) -> bool:
        """Indicate whether the strategy proves optimality when unbudgeted."""

    @abstractmethod
    def solve(self, ledger: SpectrumLedger) -> StrategyOutcome:
        """Decide every request and commit the accepted ones.

        Args:
            ledger: Empty ledger owned by the caller

        Returns:
            Outcome with one assignment per request
        """

    def get_info(self) -> dict[str, Any]:
        """Describe the strategy."""
        return {
            "name": self.algorithm_name,
            "class": type(self).__name__,
            "exact": self.is_exact,
            "description": (type(self).__doc__ or "").strip().splitlines()[0],
        }
