"""
Core solve machinery: spectrum ledger, feasibility checks and the engine.
"""

from eonac.core.ledger import SpectrumLedger
from eonac.core.feasibility import (
    FeasibilityChecker,
    FeasibilityResult,
    InfeasibilityReason,
)
from eonac.core.engine import AssignmentEngine, solve

__all__ = [
    "AssignmentEngine",
    "FeasibilityChecker",
    "FeasibilityResult",
    "InfeasibilityReason",
    "SpectrumLedger",
    "solve",
]
