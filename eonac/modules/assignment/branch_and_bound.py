"""
Exact admission control by depth-first branch-and-bound.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from dataclasses import dataclass

from eonac.core.feasibility import FeasibilityChecker, FeasibilityResult
from eonac.core.ledger import SpectrumLedger
from eonac.domain.assignment import Assignment, SearchStats
from eonac.domain.catalog import Path, Request, RequestCatalog
from eonac.domain.config import SolverConfig
from eonac.domain.errors import RequestUnsatisfiable, SearchBudgetExceeded
from eonac.interfaces.assignment import AbstractAssignmentStrategy, StrategyOutcome
from eonac.modules.assignment.first_fit_decreasing import FirstFitDecreasingAssigner
from eonac.modules.assignment.utils import (
    commit_candidate,
    feasible_candidates,
    first_feasible,
    iter_candidates,
    order_requests,
    rejected_assignment,
)
from eonac.utils.logging_config import LoggerAdapter, get_logger

logger = get_logger(__name__)

Choice = tuple[int, Path, FeasibilityResult]


@dataclass
class _Frame:
    """An undecided request on the search stack."""

    index: int
    accepted: int
    request: Request
    choices: Iterator[Choice]
    placed: Choice | None = None


class BranchAndBoundAssigner(AbstractAssignmentStrategy):
    """Exact admission control maximising the number of accepted requests.

    Requests are decided in a fixed priority order. At each request every
    feasible (path, start, zone) choice is committed provisionally and the
    search descends; on the way back the commitment is released. The reject
    branch is explored last. A branch is pruned once the accepted count plus
    an upper bound on the remaining acceptances cannot beat the incumbent.

    Upper bound on the remaining acceptances, cheapest first:
        1. the number of undecided requests
        2. the number of undecided requests that still have at least one
           feasible candidate (the ledger only fills up deeper in a branch,
           so an infeasible request stays infeasible)

    The incumbent is seeded with the first-fit-decreasing result unless
    ``seed_with_greedy`` is off. ``max_steps`` / ``time_limit_s`` bound the
    search; when either trips the best assignment found so far is returned
    with ``budget_exceeded`` set, followed by a first-fit pass that admits
    any request still feasible next to it.

    The search keeps its own frame stack, so instance size is bounded by
    the budget and not by the interpreter recursion limit.
    """

    def __init__(self, catalog: RequestCatalog, config: SolverConfig) -> None:
        super().__init__(catalog, config)
        self._order: list[Request] = []
        self._ledger: SpectrumLedger | None = None
        self._checker: FeasibilityChecker | None = None
        self._current: dict[str, Choice] = {}
        self._best: dict[str, Choice] = {}
        self._best_count = -1
        self._stats = SearchStats()
        self._started = 0.0
        self._log = LoggerAdapter(logger, {"strategy": self.algorithm_name})

    @property
    def algorithm_name(self) -> str:
        """Return the registry name of the strategy."""
        return "branch_and_bound"

    @property
    def is_exact(self) -> bool:
        """Exhaustive search proves optimality when the budget allows."""
        return True

    def solve(self, ledger: SpectrumLedger) -> StrategyOutcome:
        """Search for a maximum-acceptance assignment.

        Args:
            ledger: Empty ledger owned by the caller

        Returns:
            Outcome with one assignment per request, in catalog order
        """
        self._started = time.perf_counter()
        self._stats = SearchStats()
        self._order = order_requests(self.catalog, self.config.priority)
        self._ledger = ledger
        self._checker = FeasibilityChecker(self.catalog, ledger)
        self._current = {}
        self._best = {}
        self._best_count = -1

        if self.config.seed_with_greedy:
            self._seed_incumbent()

        budget_exceeded = False
        if self._best_count < len(self._order):
            try:
                self._search()
            except SearchBudgetExceeded as e:
                budget_exceeded = True
                self._log.warning(
                    "%s; returning best assignment with %d accepted",
                    e,
                    max(self._best_count, 0),
                )

        assignments = self._commit_best(ledger)
        self._stats.elapsed_s = time.perf_counter() - self._started
        self._log.debug(
            "Explored %d nodes, checked %d candidates",
            self._stats.nodes_explored,
            self._stats.candidates_checked,
        )
        return StrategyOutcome(
            assignments=assignments,
            proven_optimal=not budget_exceeded,
            budget_exceeded=budget_exceeded,
            stats=self._stats,
        )

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def _seed_incumbent(self) -> None:
        greedy = FirstFitDecreasingAssigner(
            self.catalog, self.config.with_overrides(workers=1)
        )
        outcome = greedy.solve(SpectrumLedger.for_catalog(self.catalog))
        self._stats.candidates_checked += outcome.stats.candidates_checked
        for request_id, assignment in outcome.assignments.items():
            if not assignment.accepted:
                continue
            self._best[request_id] = (
                assignment.path_index,
                assignment.path,
                FeasibilityResult(
                    feasible=True,
                    slot_range=assignment.occupied_slots,
                    zone_id=assignment.zone_id,
                ),
            )
        self._best_count = len(self._best)
        self._log.debug("Greedy incumbent accepts %d requests", self._best_count)

    def _search(self) -> None:
        """
        Depth-first search over an explicit stack of frames.

        A frame holds one request's remaining choices and the choice currently
        committed for it. The reject branch of a request is its last action,
        so its frame is replaced by the child frame instead of kept below it.
        Provisional commitments still on the stack are released on exit,
        including when the budget trips.
        """
        stack: list[_Frame] = []
        try:
            self._enter(stack, 0, 0)
            while stack:
                frame = stack[-1]
                if frame.placed is not None:
                    self._undo(frame)
                    if self._best_count == len(self._order):
                        stack.pop()
                        continue

                choice = next(frame.choices, None)
                if choice is not None:
                    self._place(frame, choice)
                    self._enter(stack, frame.index + 1, frame.accepted + 1)
                    continue

                stack.pop()
                self._enter(stack, frame.index + 1, frame.accepted)
        finally:
            for frame in reversed(stack):
                if frame.placed is not None:
                    self._undo(frame)

    def _enter(self, stack: list[_Frame], index: int, accepted: int) -> None:
        """Visit a node; push a frame when its request still needs deciding."""
        self._tick()
        remaining = len(self._order) - index
        if accepted + remaining <= self._best_count:
            return

        if index == len(self._order):
            self._best = dict(self._current)
            self._best_count = accepted
            self._stats.incumbent_updates += 1
            self._log.debug("New incumbent accepts %d requests", accepted)
            return

        if accepted + self._satisfiable_from(index) <= self._best_count:
            return

        request = self._order[index]
        choices = feasible_candidates(
            self._checker, request, self._stats, all_zones=True
        )
        stack.append(_Frame(index, accepted, request, iter(choices)))

    def _place(self, frame: _Frame, choice: Choice) -> None:
        _, path, result = choice
        self._ledger.commit(
            path.links, result.zone_id, result.slot_range, frame.request.request_id
        )
        self._current[frame.request.request_id] = choice
        frame.placed = choice

    def _undo(self, frame: _Frame) -> None:
        _, path, result = frame.placed
        del self._current[frame.request.request_id]
        self._ledger.release(
            path.links, result.zone_id, result.slot_range, frame.request.request_id
        )
        frame.placed = None

    def _satisfiable_from(self, index: int) -> int:
        """Undecided requests that still have a feasible candidate."""
        count = 0
        for request in self._order[index:]:
            for _, path, start in iter_candidates(request):
                self._stats.candidates_checked += 1
                if self._checker.check(request, path, start).feasible:
                    count += 1
                    break
        return count

    def _tick(self) -> None:
        self._stats.nodes_explored += 1
        elapsed = time.perf_counter() - self._started
        max_steps = self.config.max_steps
        if max_steps is not None and self._stats.nodes_explored > max_steps:
            raise SearchBudgetExceeded(self._stats.nodes_explored, elapsed)
        time_limit = self.config.time_limit_s
        if time_limit is not None and elapsed > time_limit:
            raise SearchBudgetExceeded(self._stats.nodes_explored, elapsed)

    # -------------------------------------------------------------------------
    # Result
    # -------------------------------------------------------------------------

    def _commit_best(self, ledger: SpectrumLedger) -> dict[str, Assignment]:
        decisions: dict[str, Assignment] = {}
        for request in self._order:
            choice = self._best.get(request.request_id)
            if choice is None:
                continue
            path_index, path, result = choice
            decisions[request.request_id] = commit_candidate(
                ledger, self.catalog, request, path_index, path, result
            )

        for request in self._order:
            if request.request_id in decisions:
                continue
            try:
                path_index, path, result = first_feasible(
                    self._checker, request, self._stats
                )
            except RequestUnsatisfiable as e:
                decisions[request.request_id] = rejected_assignment(e)
                continue
            decisions[request.request_id] = commit_candidate(
                ledger, self.catalog, request, path_index, path, result
            )
            self._log.info(
                "Fill pass admitted '%s' after the search stopped",
                request.request_id,
            )

        return {r.request_id: decisions[r.request_id] for r in self.catalog.requests}
