"""
Custom exceptions for admission control and spectrum assignment.

This module defines the exception hierarchy used across the catalog, the
spectrum ledger and the assignment strategies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from eonac.core.feasibility import FeasibilityResult


class AdmissionControlError(Exception):
    """
    Base exception for all EONAC errors.

    Allows broad exception handling by callers embedding the solver.
    """


class ConfigurationError(AdmissionControlError):
    """
    Raised when the problem data or solver settings are invalid.

    Always raised before any search starts: unknown request types, zones
    without a type, non-positive slot demands or slot ceiling, malformed
    paths and similar.
    """


class InfeasibleCandidate(AdmissionControlError):
    """
    Raised when a single (path, start) candidate violates a hard constraint.

    Expected and local. Strategies that prefer exceptions over result
    objects raise it from :meth:`FeasibilityChecker.require`.
    """

    def __init__(self, result: FeasibilityResult) -> None:
        self.result = result
        super().__init__(
            f"Candidate infeasible ({result.reason.value if result.reason else '?'}): "
            f"{result.detail}"
        )


class RequestUnsatisfiable(AdmissionControlError):
    """
    Raised when no candidate of a request is feasible.

    Caught per request by the strategies and turned into a rejected
    assignment; it never aborts a solve.
    """

    def __init__(self, request_id: str, infeasible_counts: dict[str, int] | None = None):
        self.request_id = request_id
        self.infeasible_counts = dict(infeasible_counts or {})
        if self.infeasible_counts:
            breakdown = ", ".join(
                f"{reason}={count}" for reason, count in self.infeasible_counts.items()
            )
        else:
            breakdown = "no candidates"
        super().__init__(f"Request '{request_id}' is unsatisfiable ({breakdown})")


class SearchBudgetExceeded(AdmissionControlError):
    """
    Raised inside the exact search when its step or time budget runs out.

    The exact strategy catches it and returns the best assignment found so
    far with ``budget_exceeded`` set.
    """

    def __init__(self, steps: int, elapsed_s: float, **context: Any) -> None:
        self.steps = steps
        self.elapsed_s = elapsed_s
        self.context = context
        super().__init__(
            f"Search budget exceeded after {steps} steps ({elapsed_s:.3f}s)"
        )


class LedgerConflictError(AdmissionControlError, ValueError):
    """
    Raised when a commit would overwrite occupied slots or exceed capacity.

    Indicates a caller skipped feasibility checks; the ledger is left
    untouched.
    """


class ConfigTypeConversionError(ConfigurationError):
    """Raised when a solver option cannot be converted to its expected type."""


class InvalidConfigValueError(ConfigurationError):
    """Raised when a converted solver option is outside its allowed range."""
