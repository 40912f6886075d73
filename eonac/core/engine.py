"""
Assignment engine: runs one admission control solve end to end.

The engine owns nothing global. Each call to :meth:`AssignmentEngine.solve`
creates a fresh ledger, hands it to the configured strategy and packages the
outcome as a :class:`SolveResult`.
"""

from __future__ import annotations

from typing import Any

from eonac.core.ledger import SpectrumLedger
from eonac.domain.assignment import SolveResult
from eonac.domain.catalog import RequestCatalog
from eonac.domain.config import SolverConfig
from eonac.domain.errors import ConfigurationError
from eonac.modules.assignment.registry import create_strategy
from eonac.utils.logging_config import get_logger

logger = get_logger(__name__)


class AssignmentEngine:
    """
    Admission control over a request catalog.

    :param catalog: Validated problem data
    :param config: Solver settings, defaults to :class:`SolverConfig` defaults

    Example:
        >>> engine = AssignmentEngine(catalog, SolverConfig(strategy="exact"))
        >>> result = engine.solve()
        >>> result.total_accepted
        5
    """

    def __init__(self, catalog: RequestCatalog, config: SolverConfig | None = None):
        self.catalog = catalog
        self.config = config or SolverConfig()
        self._validate()

    def _validate(self) -> None:
        """Fatal checks that must pass before any search."""
        if self.config.unknown_link_policy != "error":
            return
        for request in self.catalog.requests:
            for path in request.candidate_paths:
                missing = self.catalog.unknown_links(path)
                if missing:
                    raise ConfigurationError(
                        f"Request '{request.request_id}' path {path} uses links "
                        f"absent from the topology: "
                        f"{', '.join(str(link) for link in missing)}"
                    )

    def new_ledger(self) -> SpectrumLedger:
        """Empty ledger sized for the catalog."""
        return SpectrumLedger.for_catalog(self.catalog)

    def solve(self) -> SolveResult:
        """
        Decide every request of the catalog.

        :return: Assignments in catalog order with the final ledger
        :raises ConfigurationError: If the settings or data are invalid
        :raises KeyError: If the configured strategy is unknown
        """
        strategy = create_strategy(self.config.strategy, self.catalog, self.config)
        ledger = self.new_ledger()

        logger.info(
            "Solving %d requests with %s (priority=%s, B=%d)",
            len(self.catalog),
            strategy.algorithm_name,
            self.config.priority,
            self.catalog.slot_ceiling,
        )
        outcome = strategy.solve(ledger)

        result = SolveResult(
            catalog=self.catalog,
            assignments=tuple(
                outcome.assignments[request.request_id]
                for request in self.catalog.requests
            ),
            ledger=ledger,
            strategy_name=strategy.algorithm_name,
            proven_optimal=outcome.proven_optimal,
            budget_exceeded=outcome.budget_exceeded,
            stats=outcome.stats,
        )

        logger.info(
            "Accepted %d/%d requests with %s in %.3fs%s",
            result.total_accepted,
            len(result.assignments),
            result.strategy_name,
            result.stats.elapsed_s,
            " (budget exceeded, not proven optimal)" if result.budget_exceeded else "",
        )
        return result


def solve(
    catalog: RequestCatalog,
    config: SolverConfig | None = None,
    **overrides: Any,
) -> SolveResult:
    """
    Convenience wrapper: build an engine and solve.

    :param catalog: Validated problem data
    :param config: Base settings
    :param overrides: Setting overrides, e.g. ``strategy="greedy"``
    :return: Solve result
    """
    config = config or SolverConfig()
    if overrides:
        config = config.with_overrides(**overrides)
    return AssignmentEngine(catalog, config).solve()
