"""
Feasibility checks for (request, path, start) candidates.

The checker is a pure function of the catalog and the current ledger
snapshot: it never mutates the ledger. Checks run cheapest first and stop at
the first failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from eonac.core.ledger import SpectrumLedger
from eonac.domain.catalog import Link, Path, Request, RequestCatalog, SlotRange
from eonac.domain.errors import ConfigurationError, InfeasibleCandidate


class InfeasibilityReason(Enum):
    """Which hard constraint rejected a candidate."""

    PATH_NOT_CANDIDATE = "path_not_candidate"
    START_NOT_CANDIDATE = "start_not_candidate"
    EXCEEDS_SLOT_CEILING = "exceeds_slot_ceiling"
    UNKNOWN_LINK = "unknown_link"
    SLOTS_OCCUPIED = "slots_occupied"
    CAPACITY_EXCEEDED = "capacity_exceeded"


@dataclass(frozen=True)
class FeasibilityResult:
    """
    Outcome of checking one candidate.

    Attributes:
        feasible: True if every hard constraint holds
        slot_range: Slots the candidate would occupy
        zone_id: Zone the candidate fits in (feasible), or the zone that
            failed (infeasible after zone resolution)
        reason: Failed constraint (infeasible only)
        link: Offending link, when the failure is link specific
        detail: Human-readable explanation
    """

    feasible: bool
    slot_range: SlotRange
    zone_id: str | None = None
    reason: InfeasibilityReason | None = None
    link: Link | None = None
    detail: str = ""

    def __bool__(self) -> bool:
        return self.feasible


class FeasibilityChecker:
    """
    Tests a candidate against every hard constraint.

    Order of checks:
        a. path and start are among the request's own candidates
        b. ``start + demand - 1 <= B``
        c. at least one zone accepts the request type (else ConfigurationError)
        d. every path link exists and the range is free in the zone bucket
        e. the zone stays within capacity on every path link

    When several zones accept the type they are tried in catalog order; the
    first one passing (d) and (e) is reported. If none passes, the failure of
    the first zone is reported.

    :param catalog: Problem data
    :param ledger: Ledger snapshot to check against (read only)
    """

    def __init__(self, catalog: RequestCatalog, ledger: SpectrumLedger) -> None:
        self.catalog = catalog
        self.ledger = ledger

    def check(self, request: Request, path: Path, start: int) -> FeasibilityResult:
        """
        Check one candidate.

        :param request: Request being placed
        :param path: Candidate path
        :param start: Candidate starting slot
        :return: Feasible result carrying the zone, or infeasible with reason
        :raises ConfigurationError: If no zone accepts the request type
        """
        demand = self.catalog.slot_demand(request)
        slot_range = SlotRange.for_demand(start, demand)

        if not request.has_path(path):
            return FeasibilityResult(
                feasible=False,
                slot_range=slot_range,
                reason=InfeasibilityReason.PATH_NOT_CANDIDATE,
                detail=f"path {path} is not a candidate of '{request.request_id}'",
            )
        if not request.has_start(start):
            return FeasibilityResult(
                feasible=False,
                slot_range=slot_range,
                reason=InfeasibilityReason.START_NOT_CANDIDATE,
                detail=f"start {start} is not a candidate of '{request.request_id}'",
            )
        if start < 1 or slot_range.end > self.catalog.slot_ceiling:
            return FeasibilityResult(
                feasible=False,
                slot_range=slot_range,
                reason=InfeasibilityReason.EXCEEDS_SLOT_CEILING,
                detail=(
                    f"range {slot_range} exceeds [1, {self.catalog.slot_ceiling}]"
                ),
            )

        zones = self.catalog.eligible_zones(request.request_type)
        if not zones:
            raise ConfigurationError(
                f"No zone accepts request type '{request.request_type}'"
            )

        for link in path.links:
            if not self.ledger.has_link(link):
                return FeasibilityResult(
                    feasible=False,
                    slot_range=slot_range,
                    reason=InfeasibilityReason.UNKNOWN_LINK,
                    link=link,
                    detail=f"link {link} is not part of the topology",
                )

        first_failure: FeasibilityResult | None = None
        for zone in zones:
            result = self._check_zone(path, zone.zone_id, slot_range)
            if result.feasible:
                return result
            if first_failure is None:
                first_failure = result
        return first_failure

    def require(self, request: Request, path: Path, start: int) -> FeasibilityResult:
        """
        Like :meth:`check` but raise on failure.

        :raises InfeasibleCandidate: If the candidate is infeasible
        """
        result = self.check(request, path, start)
        if not result.feasible:
            raise InfeasibleCandidate(result)
        return result

    def zone_alternatives(
        self, request: Request, path: Path, result: FeasibilityResult
    ) -> list[FeasibilityResult]:
        """
        Further zones where an already feasible candidate also fits.

        Only zones after ``result.zone_id`` in catalog order are tried. An
        exact search branches on these as well, since the zone choice can
        matter for later requests.

        :param request: Request being placed
        :param path: Candidate path of ``result``
        :param result: Feasible result returned by :meth:`check`
        :return: Feasible results, one per further zone that passes
        """
        zone_ids = [zone.zone_id for zone in self.catalog.eligible_zones(request.request_type)]
        later = zone_ids[zone_ids.index(result.zone_id) + 1 :]
        alternatives = []
        for zone_id in later:
            alternative = self._check_zone(path, zone_id, result.slot_range)
            if alternative.feasible:
                alternatives.append(alternative)
        return alternatives

    def _check_zone(
        self, path: Path, zone_id: str, slot_range: SlotRange
    ) -> FeasibilityResult:
        for link in path.links:
            if not self.ledger.is_free(link, zone_id, slot_range):
                return FeasibilityResult(
                    feasible=False,
                    slot_range=slot_range,
                    zone_id=zone_id,
                    reason=InfeasibilityReason.SLOTS_OCCUPIED,
                    link=link,
                    detail=f"slots {slot_range} occupied on {link} in zone {zone_id}",
                )
        for link in path.links:
            if not self.ledger.capacity_ok(link, zone_id, slot_range):
                return FeasibilityResult(
                    feasible=False,
                    slot_range=slot_range,
                    zone_id=zone_id,
                    reason=InfeasibilityReason.CAPACITY_EXCEEDED,
                    link=link,
                    detail=(
                        f"zone {zone_id} capacity "
                        f"{self.ledger.zone(zone_id).capacity} exceeded on {link}"
                    ),
                )
        return FeasibilityResult(feasible=True, slot_range=slot_range, zone_id=zone_id)
