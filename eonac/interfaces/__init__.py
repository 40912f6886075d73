"""Interfaces implemented by pluggable EONAC components."""

from eonac.interfaces.assignment import AbstractAssignmentStrategy, StrategyOutcome

__all__ = ["AbstractAssignmentStrategy", "StrategyOutcome"]
