"""
Read-only projections over a finished solve.

The report never mutates the result or its ledger and can be built and
queried any number of times.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any

from eonac.domain.assignment import SolveResult
from eonac.domain.catalog import Link


@dataclass(frozen=True)
class ZoneLinkUsage:
    """Occupied slots of one zone on one link against the zone capacity."""

    link: Link
    zone_id: str
    accepted_type: str
    occupied: int
    capacity: int

    @property
    def utilization(self) -> float:
        """Occupied share of the capacity (0.0 when capacity is 0)."""
        if self.capacity == 0:
            return 0.0
        return self.occupied / self.capacity

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping for serialization."""
        return {
            "link": list(self.link),
            "zone": self.zone_id,
            "accepted_type": self.accepted_type,
            "occupied": self.occupied,
            "capacity": self.capacity,
        }


@dataclass(frozen=True)
class LinkUsage:
    """Occupied slots on one link, all zones together, against ``B``."""

    link: Link
    occupied: int
    slot_ceiling: int

    @property
    def utilization(self) -> float:
        """Occupied share of the slot ceiling."""
        return self.occupied / self.slot_ceiling

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping for serialization."""
        return {
            "link": list(self.link),
            "occupied": self.occupied,
            "slot_ceiling": self.slot_ceiling,
        }


class SolutionReport:
    """
    Per-request, per-zone and per-link views of a solve result.

    :param result: Finished solve

    Example:
        >>> report = SolutionReport(result)
        >>> report.to_dict()["Total_Accepted"]
        5
        >>> report.find_violations()
        []
    """

    def __init__(self, result: SolveResult) -> None:
        self.result = result
        self.catalog = result.catalog
        self.ledger = result.ledger

    @property
    def total_accepted(self) -> int:
        """Number of accepted requests."""
        return self.result.total_accepted

    @property
    def total_requests(self) -> int:
        """Number of requests in the catalog."""
        return len(self.result.assignments)

    @property
    def acceptance_ratio(self) -> float:
        """Accepted share of all requests (0.0 for an empty catalog)."""
        if not self.total_requests:
            return 0.0
        return self.total_accepted / self.total_requests

    def request_outcomes(self) -> list[dict[str, Any]]:
        """One mapping per request, in catalog order."""
        outcomes = []
        for assignment in self.result.assignments:
            request = self.catalog.get_request(assignment.request_id)
            outcome = assignment.to_dict()
            outcome["type"] = request.request_type
            outcomes.append(outcome)
        return outcomes

    def zone_link_usage(self, include_empty: bool = False) -> list[ZoneLinkUsage]:
        """
        Occupied slots per (link, zone) against capacity.

        :param include_empty: Also list buckets with nothing occupied
        :return: Usage rows, links in topology order then zones in catalog order
        """
        rows = []
        for link in self.catalog.links:
            for zone in self.catalog.zones:
                occupied = self.ledger.occupied_count(link, zone.zone_id)
                if occupied == 0 and not include_empty:
                    continue
                rows.append(
                    ZoneLinkUsage(
                        link=link,
                        zone_id=zone.zone_id,
                        accepted_type=zone.accepted_type,
                        occupied=occupied,
                        capacity=zone.capacity,
                    )
                )
        return rows

    def link_usage(self) -> list[LinkUsage]:
        """Occupied slots per link (all zones) against ``B``."""
        return [
            LinkUsage(
                link=link,
                occupied=self.ledger.link_total(link),
                slot_ceiling=self.catalog.slot_ceiling,
            )
            for link in self.catalog.links
        ]

    def zone_summary(self) -> dict[str, dict[str, Any]]:
        """Per-zone accepted requests and peak per-link occupancy."""
        summary: dict[str, dict[str, Any]] = {
            zone.zone_id: {
                "accepted_type": zone.accepted_type,
                "capacity": zone.capacity,
                "accepted_requests": 0,
                "peak_occupied": 0,
            }
            for zone in self.catalog.zones
        }
        for assignment in self.result.accepted:
            summary[assignment.zone_id]["accepted_requests"] += 1
        for row in self.zone_link_usage():
            entry = summary[row.zone_id]
            entry["peak_occupied"] = max(entry["peak_occupied"], row.occupied)
        return summary

    def find_violations(self) -> list[str]:
        """
        Re-derive every hard constraint from the assignments and the ledger.

        Checks, for accepted requests: candidates respected, range length and
        bounds, zone type segregation, continuity along the path (the ledger
        holds the request on every link for the whole range), single
        occupancy per (link, zone, slot), capacity per (link, zone), and that
        the ledger holds nothing beyond the accepted assignments.

        :return: Human-readable violations, empty when the solution is valid
        """
        violations: list[str] = []
        occupancy: dict[tuple[Link, str, int], list[str]] = defaultdict(list)
        bucket_counts: dict[tuple[Link, str], int] = defaultdict(int)
        slot_ceiling = self.catalog.slot_ceiling

        for assignment in self.result.accepted:
            request_id = assignment.request_id
            request = self.catalog.get_request(request_id)
            demand = self.catalog.slot_demand(request)
            slots = assignment.occupied_slots

            if not request.has_path(assignment.path):
                violations.append(f"{request_id}: path {assignment.path} not a candidate")
            if not request.has_start(assignment.start):
                violations.append(f"{request_id}: start {assignment.start} not a candidate")
            if slots.length != demand:
                violations.append(
                    f"{request_id}: occupies {slots.length} slots, demand is {demand}"
                )
            if slots.start < 1 or slots.end > slot_ceiling:
                violations.append(
                    f"{request_id}: range {slots} outside [1, {slot_ceiling}]"
                )
                continue

            zone = self.catalog.get_zone(assignment.zone_id)
            if zone.accepted_type != request.request_type:
                violations.append(
                    f"{request_id}: type {request.request_type} recorded in zone "
                    f"{zone.zone_id} accepting {zone.accepted_type}"
                )

            for link in assignment.path.links:
                if not self.ledger.has_link(link):
                    violations.append(f"{request_id}: link {link} not in topology")
                    continue
                owners = self.ledger.owners(link, zone.zone_id)
                for slot in slots.slots():
                    occupancy[(link, zone.zone_id, slot)].append(request_id)
                    if owners.get(slot) != request_id:
                        violations.append(
                            f"{request_id}: slot {slot} on {link} zone "
                            f"{zone.zone_id} held by {owners.get(slot)!r} in the ledger"
                        )
                bucket_counts[(link, zone.zone_id)] += slots.length

        for (link, zone_id, slot), holders in occupancy.items():
            if len(holders) > 1:
                violations.append(
                    f"slot {slot} on {link} zone {zone_id} shared by {sorted(holders)}"
                )

        for link, zone_id in self.ledger.buckets():
            ledger_count = self.ledger.occupied_count(link, zone_id)
            if ledger_count != bucket_counts.get((link, zone_id), 0):
                violations.append(
                    f"ledger holds {ledger_count} slots on {link} zone {zone_id}, "
                    f"assignments account for {bucket_counts.get((link, zone_id), 0)}"
                )

        for (link, zone_id), count in bucket_counts.items():
            capacity = self.catalog.get_zone(zone_id).capacity
            if count > capacity:
                violations.append(
                    f"{count} slots on {link} zone {zone_id} exceed capacity {capacity}"
                )

        return violations

    def to_dict(self) -> dict[str, Any]:
        """Serializable snapshot of the whole report."""
        return {
            "Total_Accepted": self.total_accepted,
            "total_requests": self.total_requests,
            "acceptance_ratio": round(self.acceptance_ratio, 6),
            "strategy": self.result.strategy_name,
            "proven_optimal": self.result.proven_optimal,
            "budget_exceeded": self.result.budget_exceeded,
            "slot_ceiling": self.catalog.slot_ceiling,
            "stats": self.result.stats.to_dict(),
            "requests": self.request_outcomes(),
            "zone_link_usage": [row.to_dict() for row in self.zone_link_usage()],
            "link_usage": [row.to_dict() for row in self.link_usage()],
            "zones": self.zone_summary(),
        }

    def summary_lines(self) -> list[str]:
        """Short text summary, one line per request plus a total."""
        lines = []
        for assignment in self.result.assignments:
            if assignment.accepted:
                lines.append(
                    f"{assignment.request_id}: accepted path {assignment.path} "
                    f"slots {assignment.occupied_slots} zone {assignment.zone_id}"
                )
            else:
                lines.append(
                    f"{assignment.request_id}: rejected ({assignment.rejection_reason})"
                )
        optimality = "optimal" if self.result.proven_optimal else "not proven optimal"
        lines.append(
            f"Total_Accepted = {self.total_accepted}/{self.total_requests} ({optimality})"
        )
        return lines
