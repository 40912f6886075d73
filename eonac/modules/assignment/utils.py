"""
Helpers shared by the admission control strategies.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator

from eonac.core.feasibility import FeasibilityChecker, FeasibilityResult
from eonac.core.ledger import SpectrumLedger
from eonac.domain.assignment import Assignment, SearchStats
from eonac.domain.catalog import Path, Request, RequestCatalog
from eonac.domain.errors import RequestUnsatisfiable

Candidate = tuple[int, Path, int]


def order_requests(catalog: RequestCatalog, priority: str) -> list[Request]:
    """
    Order the catalog's requests for a strategy.

    :param catalog: Problem data
    :param priority: ``demand_desc`` (largest demand first), ``demand_asc``
        or ``catalog`` (input order); demand ties break by request id
    :return: Requests in decision order
    :raises ValueError: If the priority is unknown
    """
    requests = list(catalog.requests)
    if priority == "catalog":
        return requests
    if priority == "demand_desc":
        return sorted(
            requests, key=lambda r: (-catalog.slot_demand(r), r.request_id)
        )
    if priority == "demand_asc":
        return sorted(requests, key=lambda r: (catalog.slot_demand(r), r.request_id))
    raise ValueError(f"Unknown request priority '{priority}'")


def iter_candidates(request: Request) -> Iterator[Candidate]:
    """Yield (path_index, path, start): paths in given order, starts ascending."""
    for path_index, path in enumerate(request.candidate_paths):
        for start in request.candidate_starts:
            yield path_index, path, start


def first_feasible(
    checker: FeasibilityChecker, request: Request, stats: SearchStats
) -> tuple[int, Path, FeasibilityResult]:
    """
    Scan candidates in order and return the first feasible one.

    :raises RequestUnsatisfiable: With per-reason counts when none fits
    """
    failures: Counter[str] = Counter()
    for path_index, path, start in iter_candidates(request):
        stats.candidates_checked += 1
        result = checker.check(request, path, start)
        if result.feasible:
            return path_index, path, result
        failures[result.reason.value] += 1
    raise RequestUnsatisfiable(request.request_id, dict(sorted(failures.items())))


def feasible_candidates(
    checker: FeasibilityChecker,
    request: Request,
    stats: SearchStats,
    all_zones: bool = False,
) -> list[tuple[int, Path, FeasibilityResult]]:
    """
    Every feasible candidate of ``request`` in scan order.

    :param all_zones: Also list each candidate once per further zone it fits
        in, right after its first-fitting zone
    """
    feasible = []
    for path_index, path, start in iter_candidates(request):
        stats.candidates_checked += 1
        result = checker.check(request, path, start)
        if not result.feasible:
            continue
        feasible.append((path_index, path, result))
        if all_zones:
            feasible.extend(
                (path_index, path, alternative)
                for alternative in checker.zone_alternatives(request, path, result)
            )
    return feasible


def commit_candidate(
    ledger: SpectrumLedger,
    catalog: RequestCatalog,
    request: Request,
    path_index: int,
    path: Path,
    result: FeasibilityResult,
) -> Assignment:
    """Commit a feasible candidate and build its accepted assignment."""
    ledger.commit(path.links, result.zone_id, result.slot_range, request.request_id)
    return accepted_assignment(catalog, request, path_index, path, result)


def accepted_assignment(
    catalog: RequestCatalog,
    request: Request,
    path_index: int,
    path: Path,
    result: FeasibilityResult,
) -> Assignment:
    """Accepted assignment for an already committed candidate."""
    return Assignment.accept(
        request_id=request.request_id,
        path=path,
        path_index=path_index,
        start=result.slot_range.start,
        slot_demand=catalog.slot_demand(request),
        zone_id=result.zone_id,
    )


def rejected_assignment(error: RequestUnsatisfiable) -> Assignment:
    """Rejected assignment carrying the unsatisfiability diagnostics."""
    return Assignment.reject(
        request_id=error.request_id,
        reason=str(error),
        infeasible_counts=error.infeasible_counts,
    )
