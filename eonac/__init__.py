"""
EONAC - admission control and spectrum assignment for elastic optical networks.

Given a catalog of connection requests with pre-computed candidate paths and
candidate starting slots, EONAC decides which requests to accept and assigns
each accepted request a path, a starting slot and a zone such that spectrum
contiguity, continuity, non-overlap, zone segregation and zone capacity hold.
"""

from eonac.core.engine import AssignmentEngine, solve
from eonac.domain.catalog import RequestCatalog
from eonac.domain.config import SolverConfig
from eonac.reporting.solution_report import SolutionReport

__all__ = [
    "AssignmentEngine",
    "RequestCatalog",
    "SolverConfig",
    "SolutionReport",
    "solve",
]

__version__ = "1.0.0"
