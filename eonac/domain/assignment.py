"""
Assignment outcomes for a solve.

This module defines frozen result objects:
- Assignment: Per-request decision (accepted with path/start/zone, or rejected)
- SearchStats: Counters collected by the strategies
- SolveResult: Complete output of one solve (SINGLE SOURCE OF TRUTH)

Assignments are created once a strategy has finally decided a request and
are never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from eonac.domain.catalog import Path, SlotRange

if TYPE_CHECKING:
    from eonac.core.ledger import SpectrumLedger
    from eonac.domain.catalog import RequestCatalog


# =============================================================================
# Assignment
# =============================================================================


@dataclass(frozen=True)
class Assignment:
    """
    Decision for a single request.

    Attributes:
        request_id: Request the decision belongs to
        accepted: Whether the request was admitted
        path: Chosen candidate path (accepted only)
        path_index: Index of ``path`` in the request's candidate paths
        start: Chosen starting slot (accepted only)
        slot_demand: Slots occupied by the request's type
        zone_id: Zone the slots are recorded under (accepted only)
        rejection_reason: Human-readable reason (rejected only)
        infeasible_counts: Per-reason count of infeasible candidates seen by
            the final feasibility scan (rejected only)

    Invariants:
        - Accepted: path, path_index, start and zone_id are all set
        - Rejected: none of them is set

    Example:
        >>> assignment = Assignment.accept("r1", path, 0, start=5, slot_demand=2,
        ...                                zone_id="z1")
        >>> assignment.occupied_slots
        SlotRange(start=5, end=6)
    """

    request_id: str
    accepted: bool
    path: Path | None = None
    path_index: int | None = None
    start: int | None = None
    slot_demand: int = 0
    zone_id: str | None = None
    rejection_reason: str | None = None
    infeasible_counts: dict[str, int] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        chosen = (self.path, self.path_index, self.start, self.zone_id)
        if self.accepted and any(value is None for value in chosen):
            raise ValueError(
                f"Accepted assignment for '{self.request_id}' must set path, "
                "path_index, start and zone_id"
            )
        if not self.accepted and any(value is not None for value in chosen):
            raise ValueError(
                f"Rejected assignment for '{self.request_id}' cannot carry a choice"
            )

    @classmethod
    def accept(
        cls,
        request_id: str,
        path: Path,
        path_index: int,
        start: int,
        slot_demand: int,
        zone_id: str,
    ) -> Assignment:
        """Build an accepted assignment."""
        return cls(
            request_id=request_id,
            accepted=True,
            path=path,
            path_index=path_index,
            start=start,
            slot_demand=slot_demand,
            zone_id=zone_id,
        )

    @classmethod
    def reject(
        cls,
        request_id: str,
        reason: str,
        infeasible_counts: dict[str, int] | None = None,
    ) -> Assignment:
        """Build a rejected assignment."""
        return cls(
            request_id=request_id,
            accepted=False,
            rejection_reason=reason,
            infeasible_counts=dict(infeasible_counts or {}),
        )

    @property
    def occupied_slots(self) -> SlotRange | None:
        """Occupied slot range, or None when rejected."""
        if not self.accepted or self.start is None:
            return None
        return SlotRange.for_demand(self.start, self.slot_demand)

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping for serialization."""
        if not self.accepted:
            return {
                "request_id": self.request_id,
                "accepted": False,
                "rejection_reason": self.rejection_reason,
                "infeasible_counts": dict(self.infeasible_counts),
            }
        slots = self.occupied_slots
        return {
            "request_id": self.request_id,
            "accepted": True,
            "path": [list(link) for link in self.path.links] if self.path else [],
            "path_index": self.path_index,
            "start": self.start,
            "end": slots.end if slots else None,
            "zone": self.zone_id,
        }


# =============================================================================
# SearchStats / SolveResult
# =============================================================================


@dataclass
class SearchStats:
    """Counters collected while solving."""

    nodes_explored: int = 0
    candidates_checked: int = 0
    incumbent_updates: int = 0
    elapsed_s: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping for serialization."""
        return {
            "nodes_explored": self.nodes_explored,
            "candidates_checked": self.candidates_checked,
            "incumbent_updates": self.incumbent_updates,
            "elapsed_s": round(self.elapsed_s, 6),
        }


@dataclass(frozen=True)
class SolveResult:
    """
    Final output of one solve.

    Attributes:
        catalog: Catalog that was solved
        assignments: One assignment per request, in catalog order
        ledger: Ledger holding exactly the accepted assignments
        strategy_name: Registry name of the strategy used
        proven_optimal: True when the acceptance count is known to be maximal
        budget_exceeded: True when the exact search stopped on its budget
        stats: Search counters
    """

    catalog: RequestCatalog
    assignments: tuple[Assignment, ...]
    ledger: SpectrumLedger
    strategy_name: str
    proven_optimal: bool = False
    budget_exceeded: bool = False
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def accepted(self) -> tuple[Assignment, ...]:
        """Accepted assignments, in catalog order."""
        return tuple(a for a in self.assignments if a.accepted)

    @property
    def rejected(self) -> tuple[Assignment, ...]:
        """Rejected assignments, in catalog order."""
        return tuple(a for a in self.assignments if not a.accepted)

    @property
    def total_accepted(self) -> int:
        """Number of accepted requests."""
        return len(self.accepted)

    def get(self, request_id: str) -> Assignment:
        """Assignment for ``request_id``."""
        for assignment in self.assignments:
            if assignment.request_id == request_id:
                return assignment
        raise KeyError(f"No assignment for request '{request_id}'")

    def decisions(self) -> tuple[tuple[Any, ...], ...]:
        """Comparable summary of every decision, used for determinism checks."""
        return tuple(
            (a.request_id, a.accepted, a.path_index, a.start, a.zone_id)
            for a in self.assignments
        )
