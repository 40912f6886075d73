"""
EONAC Admission Control Strategies.

This package contains the strategies that decide which requests to accept
and where to place them:

- Branch-and-bound (exact, maximises acceptances, budgeted)
- First-fit-decreasing (greedy, no optimality guarantee)

All strategies implement the AbstractAssignmentStrategy interface and can be
accessed through the AssignmentRegistry for dynamic selection.
"""

from .branch_and_bound import BranchAndBoundAssigner
from .first_fit_decreasing import FirstFitDecreasingAssigner
from .registry import (
    ASSIGNMENT_STRATEGIES,
    AssignmentRegistry,
    create_strategy,
    get_strategy,
    get_strategy_info,
    list_strategies,
    register_strategy,
    resolve_strategy_name,
)
from .utils import order_requests

__all__ = [
    # Registry functions
    "AssignmentRegistry",
    "create_strategy",
    "get_strategy",
    "get_strategy_info",
    "list_strategies",
    "register_strategy",
    "resolve_strategy_name",
    "ASSIGNMENT_STRATEGIES",
    # Strategy classes
    "BranchAndBoundAssigner",
    "FirstFitDecreasingAssigner",
    # Helpers
    "order_requests",
]
