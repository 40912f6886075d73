"""
First-fit-decreasing admission control.
"""

from __future__ import annotations

import time
from collections import Counter
from concurrent.futures import Executor, ThreadPoolExecutor

from eonac.core.feasibility import FeasibilityChecker, InfeasibilityReason
from eonac.core.ledger import SpectrumLedger
from eonac.domain.assignment import Assignment, SearchStats
from eonac.domain.catalog import Request
from eonac.domain.errors import RequestUnsatisfiable
from eonac.interfaces.assignment import AbstractAssignmentStrategy, StrategyOutcome
from eonac.modules.assignment.utils import (
    accepted_assignment,
    commit_candidate,
    first_feasible,
    iter_candidates,
    order_requests,
    rejected_assignment,
)
from eonac.utils.logging_config import LoggerAdapter, get_logger

logger = get_logger(__name__)


class FirstFitDecreasingAssigner(AbstractAssignmentStrategy):
    """Greedy first-fit-decreasing admission with no optimality guarantee.

    Requests are taken in priority order (by default largest slot demand
    first, ties by request id). For each request the candidate paths are
    scanned in their given order and the starts in ascending order; the
    first feasible candidate is committed and never revisited. A request
    with no feasible candidate is rejected.

    The acceptance count is only known to be maximal when every request is
    accepted; use the branch-and-bound strategy when optimality matters.

    With ``workers > 1`` the candidates of one request are checked in a
    thread pool against the current ledger. Commits stay sequential and go
    through :meth:`SpectrumLedger.try_commit`, which re-validates under the
    ledger lock, so the outcome is identical to the single-threaded scan.
    """

    @property
    def algorithm_name(self) -> str:
        """Return the registry name of the strategy."""
        return "first_fit_decreasing"

    @property
    def is_exact(self) -> bool:
        """Greedy decisions are irrevocable, so optimality is not proven."""
        return False

    def solve(self, ledger: SpectrumLedger) -> StrategyOutcome:
        """Decide every request in priority order.

        Args:
            ledger: Empty ledger owned by the caller

        Returns:
            Outcome with one assignment per request, in catalog order
        """
        log = LoggerAdapter(logger, {"strategy": self.algorithm_name})
        started = time.perf_counter()
        stats = SearchStats()
        checker = FeasibilityChecker(self.catalog, ledger)
        decisions: dict[str, Assignment] = {}

        executor = (
            ThreadPoolExecutor(max_workers=self.config.workers)
            if self.config.workers > 1
            else None
        )
        try:
            for request in order_requests(self.catalog, self.config.priority):
                stats.nodes_explored += 1
                try:
                    assignment = self._place(request, ledger, checker, stats, executor)
                except RequestUnsatisfiable as e:
                    log.debug("Rejected: %s", e)
                    assignment = rejected_assignment(e)
                else:
                    log.debug(
                        "Accepted '%s' on path %s slots %s zone %s",
                        request.request_id,
                        assignment.path,
                        assignment.occupied_slots,
                        assignment.zone_id,
                    )
                decisions[request.request_id] = assignment
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        stats.elapsed_s = time.perf_counter() - started
        ordered = {r.request_id: decisions[r.request_id] for r in self.catalog.requests}
        accepted = sum(1 for assignment in ordered.values() if assignment.accepted)
        return StrategyOutcome(
            assignments=ordered,
            proven_optimal=accepted == len(ordered),
            budget_exceeded=False,
            stats=stats,
        )

    def _place(
        self,
        request: Request,
        ledger: SpectrumLedger,
        checker: FeasibilityChecker,
        stats: SearchStats,
        executor: Executor | None,
    ) -> Assignment:
        if executor is None:
            path_index, path, result = first_feasible(checker, request, stats)
            return commit_candidate(ledger, self.catalog, request, path_index, path, result)

        candidates = list(iter_candidates(request))
        results = list(
            executor.map(lambda c: checker.check(request, c[1], c[2]), candidates)
        )
        stats.candidates_checked += len(candidates)

        failures: Counter[str] = Counter()
        for (path_index, path, _), result in zip(candidates, results):
            if not result.feasible:
                failures[result.reason.value] += 1
                continue
            if ledger.try_commit(
                path.links, result.zone_id, result.slot_range, request.request_id
            ):
                return accepted_assignment(
                    self.catalog, request, path_index, path, result
                )
            failures[InfeasibilityReason.SLOTS_OCCUPIED.value] += 1
        raise RequestUnsatisfiable(request.request_id, dict(sorted(failures.items())))
